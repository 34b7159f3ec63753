from ...core.models import InputSpec
from ..flow import Flow, navigate_to, wait_for, fill_field, click_on, verify, visible, gone, url_contains
from ..targets import Target, text

INPUTS = (
    InputSpec("login_url", ("PCPP_LOGIN_URL", "ROTATE_LOGIN_URL", "ANCHOR_LOGIN_URL"), required=False,
              default="https://pcpartpicker.com/accounts/login/"),
    InputSpec("change_password_url", ("PCPP_CHANGE_PASSWORD_URL", "ROTATE_CHANGE_PASSWORD_URL",
                                     "ANCHOR_CHANGE_PASSWORD_URL"), required=False,
              default="https://pcpartpicker.com/accounts/password/change/"),
    InputSpec("username", ("PCPP_USERNAME", "ROTATE_USERNAME", "ROTATE_EMAIL",
                           "ANCHOR_USERNAME", "ANCHOR_LOGIN", "ANCHOR_EMAIL"),
              help="Account username or email"),
    InputSpec("old_password", ("PCPP_PASSWORD", "ROTATE_PASSWORD", "ROTATE_OLD_PASSWORD",
                               "ANCHOR_OLD_PASSWORD", "ANCHOR_PASSWORD"), secret=True),
    InputSpec("new_password", ("PCPP_NEW_PASSWORD", "ROTATE_NEW_PASSWORD", "ANCHOR_NEW_PASSWORD"), secret=True),
)

LOGIN_FORM = Target('form[action="/accounts/login/"]', description="login form")
USERNAME = Target("#id_username", 'input[name="username"]', "input#id_login", description="username input")
PASSWORD = Target("#id_password", 'input[name="password"]', description="password input")
LOGIN_SUBMIT = Target(
    "#form_submit",
    'form[action="/accounts/login/"] button[type="submit"]',
    'form[action="/accounts/login/"] input[type="submit"]',
    description="login submit button",
)
LOGOUT_LINK = Target('a[href="/accounts/logout/"]', description="logout link")

OLD_PASSWORD = Target("#id_old_password", 'input[name="old_password"]', description="old password input")
NEW_PASSWORD = Target("#id_new_password1", 'input[name="new_password1"]', 'input[name="new_password"]',
                      description="new password input")
CONFIRM_PASSWORD = Target("#id_new_password2", 'input[name="new_password2"]', 'input[name="new_password_confirm"]',
                          description="confirm password input")
CHANGE_SUBMIT = Target(
    'input.button[type="submit"][value="Change Password"]',
    'form[action*="/accounts/password/change/"] [type="submit"]',
    description="change password button",
)
SUCCESS_TEXT = Target(text("Your password has been changed"), description="password changed confirmation")
FORM_ERRORS = Target("ul.errorlist", ".alert-error", description="form error list")

FLOW = Flow(
    name="pcpartpicker",
    site="pcpartpicker.com",
    description="Change the account password on PCPartPicker",
    inputs=INPUTS,
    steps=(
        navigate_to("open-login", "{login_url}", timeout_ms=25000),
        wait_for("login-form", LOGIN_FORM),
        fill_field("fill-username", USERNAME, "username", secret=False, timeout_ms=20000),
        fill_field("fill-password", PASSWORD, "old_password", timeout_ms=20000),
        click_on("submit-login", LOGIN_SUBMIT, navigates=True),
        verify(
            "confirm-login", visible(LOGOUT_LINK), gone(LOGIN_FORM),
            timeout_ms=5000,
            failure_message="Login appears to have failed: login form still visible after submit.",
        ),
        navigate_to("open-change-password", "{change_password_url}", timeout_ms=25000),
        fill_field("fill-old-password", OLD_PASSWORD, "old_password", timeout_ms=20000),
        fill_field("fill-new-password", NEW_PASSWORD, "new_password", timeout_ms=20000),
        fill_field("fill-confirm-password", CONFIRM_PASSWORD, "new_password", timeout_ms=20000),
        click_on("submit-change", CHANGE_SUBMIT, navigates=True),
        verify(
            "confirm-change", url_contains("/accounts/password/change/done/"), visible(SUCCESS_TEXT),
            timeout_ms=5000,
            error_target=FORM_ERRORS,
            success_message="Password changed successfully.",
            failure_message="Password change may have failed: success URL or confirmation text not detected.",
        ),
    ),
)
