"""
Fandom: sign-in and password settings live on auth.fandom.com, while the wiki
special pages that lead there live on the community host. After a new
password is submitted, Fandom may drop the session and show the sign-in form
again; the flow then signs in once more with the NEW password before logging
out.
"""
from ...core.models import InputSpec
from ..flow import Flow, Reauth, navigate_to, wait_for, fill_field, click_on, verify, gone
from ..targets import Target

INPUTS = (
    InputSpec("base_url", ("FANDOM_BASE_URL", "ROTATE_BASE_URL", "ANCHOR_FANDOM_BASE_URL"), required=False,
              default="https://community.fandom.com", is_url=True),
    InputSpec("username", ("FANDOM_USERNAME", "ROTATE_USERNAME", "ANCHOR_FANDOM_USERNAME")),
    InputSpec("password", ("FANDOM_PASSWORD", "ROTATE_PASSWORD", "ANCHOR_FANDOM_PASSWORD"),
              secret=True, help="Current password"),
    InputSpec("new_password", ("FANDOM_NEW_PASSWORD", "ROTATE_NEW_PASSWORD", "ANCHOR_FANDOM_NEW_PASSWORD"),
              secret=True),
)

SIGNIN_USERNAME = Target('input#identifier.wds-input__field[data-test="signin-username-field"]',
                         description="sign-in username field")
SIGNIN_PASSWORD = Target('input#password.wds-input__field[data-test="signin-password-field"]',
                         description="sign-in password field")
SIGNIN_SUBMIT = Target('button#method.wds-button[data-test="signin-password-submit"]',
                       description="sign-in button")
SETTINGS_NEW_PASSWORD = Target('input#password.wds-input__field[data-test="settings-password-field"]',
                               description="settings new password field")
LOGOUT_CONFIRM = Target('input.wds-button[type="submit"][value="Confirm"]', description="logout confirm button")

SIGN_IN = (
    wait_for("signin-form", SIGNIN_USERNAME),
    fill_field("signin-username", SIGNIN_USERNAME, "username", secret=False),
    fill_field("signin-password", SIGNIN_PASSWORD, "password"),
    click_on("signin-submit", SIGNIN_SUBMIT, navigates=True, attempts=1),
)

FLOW = Flow(
    name="fandom",
    site="fandom.com",
    description="Change the Fandom account password and log out",
    inputs=INPUTS,
    steps=(
        navigate_to("open-login", "{base_url}/wiki/Special:UserLogin"),
        *SIGN_IN,
        navigate_to("open-change-password", "{base_url}/wiki/Special:ChangePassword"),
        wait_for("settings-form", SETTINGS_NEW_PASSWORD),
        fill_field("submit-new-password", SETTINGS_NEW_PASSWORD, "new_password", submit_key="Enter"),
        navigate_to("open-logout", "{base_url}/wiki/Special:UserLogout"),
        click_on("confirm-logout", LOGOUT_CONFIRM, navigates=True, attempts=1),
        verify(
            "logged-out", gone(LOGOUT_CONFIRM),
            optimistic=True,
            success_message="Password changed and logout completed.",
        ),
    ),
    reauth=Reauth(after="submit-new-password", login_form=SIGNIN_USERNAME, steps=SIGN_IN,
                  credential="password", replacement="new_password", timeout_ms=6000),
)
