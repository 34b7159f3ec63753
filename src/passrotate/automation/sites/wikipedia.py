"""
Wikipedia (MediaWiki): labels and roles are more stable than ids across skins,
so most fields fall back from the canonical id to an accessible-label query.

Login steps are skipped when the personal user-page link is already present.
A two-factor prompt, when shown, consumes WIKI_TOTP_CODE; the run fails with a
missing-input message if the prompt shows up without a code configured. Login,
two-factor and change forms that render no matching submit button are
submitted by pressing Enter in their last field.
"""
from ...core.models import InputSpec
from ..forms import FillMode
from ..flow import Flow, navigate_to, wait_for, fill_field, click_on, verify, visible, gone
from ..targets import Target, css, label, role

INPUTS = (
    InputSpec("base_url", ("WIKI_BASE_URL", "ROTATE_BASE_URL", "ANCHOR_WIKI_BASE_URL"), required=False,
              default="https://en.wikipedia.org", is_url=True),
    InputSpec("username", ("WIKI_USERNAME", "ROTATE_USERNAME", "ANCHOR_WIKI_USERNAME")),
    InputSpec("password", ("WIKI_PASSWORD", "ROTATE_PASSWORD", "ANCHOR_WIKI_PASSWORD"),
              secret=True, help="Current password"),
    InputSpec("new_password", ("WIKI_NEW_PASSWORD", "ROTATE_NEW_PASSWORD", "ANCHOR_WIKI_NEW_PASSWORD"),
              secret=True),
    InputSpec("totp_code", ("WIKI_TOTP_CODE", "ROTATE_TOTP_CODE", "ANCHOR_WIKI_TOTP_CODE"), required=False,
              secret=True, help="One-time code, only needed when two-factor authentication is enabled"),
)

PASSWORD_FORM_PATH = "Special:ChangeCredentials/MediaWiki%5CAuth%5CPasswordAuthenticationRequest"

LOGGED_IN = Target("#pt-userpage", description="user page link")
USERNAME = Target(css("#wpName1"), label("username|user name"), description="username input")
PASSWORD = Target(css("#wpPassword1"), label("password"), description="password input")
LOGIN_SUBMIT = Target('#wpLoginAttempt, [name="wploginattempt"]', description="log in button")
OTP_INPUT = Target(
    label("one-time|authentication code|verification code|2-step"),
    css('input[id*="oath"], input[name*="oath"], input[id*="otp"], input[name*="otp"]'),
    description="two-factor code input",
)
OTP_SUBMIT = Target(role("button", "continue|verify|submit|log in|proceed"), description="two-factor submit button")
PASSWORD_ENTRY = Target('dt:has-text("Password-based authentication")', description="password credential entry")
CURRENT_PASSWORD = Target(label("current password"), description="current password input")
NEW_PASSWORD = Target(label("new password"), description="new password input")
CONFIRM_PASSWORD = Target(label("confirm new password|retype new password|confirm password"),
                          description="confirm password input")
CHANGE_SUBMIT = Target(role("button", "save|change|submit|apply"), description="save button")
SUCCESS_BOX = Target(".mw-message-box-success, .mw-notification-area .mw-notification",
                     description="success message")
ERROR_BOX = Target(".mw-message-box-error, .oo-ui-messageDialog-error", description="error message")

TYPED = dict(mode=FillMode.TYPE)

FLOW = Flow(
    name="wikipedia",
    site="wikipedia.org",
    description="Change a Wikipedia account password through Special:ChangeCredentials",
    inputs=INPUTS,
    steps=(
        navigate_to("open-login", "{base_url}/w/index.php?title=Special:UserLogin", timeout_ms=45000),
        fill_field("fill-username", USERNAME, "username", secret=False, skip_if=LOGGED_IN, **TYPED),
        fill_field("fill-password", PASSWORD, "password", skip_if=LOGGED_IN, **TYPED),
        # Forms without a recognizable submit button are submitted with Enter instead.
        fill_field("submit-login-with-enter", PASSWORD, "password", submit_key="Enter",
                   skip_if=LOGIN_SUBMIT, only_if=PASSWORD, **TYPED),
        click_on("submit-login", LOGIN_SUBMIT, navigates=True, skip_if=LOGGED_IN, only_if=LOGIN_SUBMIT),
        fill_field("fill-otp", OTP_INPUT, "totp_code", optional=True, timeout_ms=3000,
                   skip_if=LOGGED_IN, **TYPED),
        fill_field("submit-otp-with-enter", OTP_INPUT, "totp_code", submit_key="Enter",
                   skip_if=OTP_SUBMIT, only_if=OTP_INPUT, **TYPED),
        click_on("submit-otp", OTP_SUBMIT, navigates=True, only_if=OTP_INPUT),
        wait_for("confirm-login", LOGGED_IN, timeout_ms=15000,
                 failure_message="Login unsuccessful: could not confirm logged-in state."),
        navigate_to("open-change-password", "{base_url}/wiki/" + PASSWORD_FORM_PATH, timeout_ms=45000,
                    expect_url=PASSWORD_FORM_PATH, fallback_url="{base_url}/wiki/Special:ChangeCredentials"),
        click_on("open-password-entry", PASSWORD_ENTRY, navigates=True, only_if=PASSWORD_ENTRY,
                 expect_url=PASSWORD_FORM_PATH, fallback_url="{base_url}/wiki/" + PASSWORD_FORM_PATH),
        fill_field("verify-identity", PASSWORD, "password", submit_key="Enter", optional=True, timeout_ms=3000,
                   skip_if=NEW_PASSWORD, **TYPED),
        fill_field("fill-current-password", CURRENT_PASSWORD, "password", optional=True, timeout_ms=2000, **TYPED),
        fill_field("fill-new-password", NEW_PASSWORD, "new_password", **TYPED),
        fill_field("fill-confirm-password", CONFIRM_PASSWORD, "new_password", **TYPED),
        fill_field("submit-change-with-enter", CONFIRM_PASSWORD, "new_password", submit_key="Enter",
                   skip_if=CHANGE_SUBMIT, **TYPED),
        click_on("submit-change", CHANGE_SUBMIT, navigates=True, only_if=CHANGE_SUBMIT),
        verify(
            "confirm-change", visible(SUCCESS_BOX), gone(NEW_PASSWORD),
            timeout_ms=5000,
            error_target=ERROR_BOX,
            optimistic=True,
            success_message="Logged in and submitted password change successfully.",
            rejected_message="Password change failed due to validation or policy error. "
                            "Review new password complexity and try again.",
        ),
    ),
)
