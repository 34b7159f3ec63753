from ...core.models import InputSpec
from ..flow import Flow, navigate_to, wait_for, fill_field, click_on, verify, gone
from ..targets import Target

INPUTS = (
    InputSpec("base_url", ("WEATHER_BASE_URL", "ROTATE_BASE_URL", "ANCHOR_WEATHER_BASE_URL"), required=False,
              default="https://weather.com", is_url=True),
    InputSpec("username", ("WEATHER_EMAIL", "ROTATE_USERNAME", "ANCHOR_WEATHER_EMAIL", "ANCHOR_USERNAME"),
              help="Account email"),
    InputSpec("password", ("WEATHER_PASSWORD", "ROTATE_PASSWORD", "ANCHOR_WEATHER_PASSWORD", "ANCHOR_PASSWORD"),
              secret=True, help="Login password"),
    InputSpec("new_password", ("WEATHER_NEW_PASSWORD", "ROTATE_NEW_PASSWORD",
                              "ANCHOR_WEATHER_NEW_PASSWORD", "ANCHOR_NEW_PASSWORD"), secret=True),
    InputSpec("current_password", ("WEATHER_CURRENT_PASSWORD", "ROTATE_CURRENT_PASSWORD",
                                  "ANCHOR_WEATHER_CURRENT_PASSWORD", "ANCHOR_CURRENT_PASSWORD"), required=False,
              secret=True, fallback="password", help="Defaults to the login password"),
)

# Class names carry build hashes; they come from a recorded session and drift on redeploys.
AVATAR = Target("span.ProfileAvatar--initial--dkm7v", description="profile avatar")
LOGIN_EMAIL = Target("#loginEmail", description="login email input")
LOGIN_PASSWORD = Target("#loginPassword", description="login password input")
LOGIN_SUBMIT = Target(
    'button.Button--primary--I3yI4.MemberLoginForm--submitButton--Bz-ob[type="submit"]',
    'form button[data-testid="ctaButton"][type="submit"]',
    description="sign in button",
)
CHANGE_PASSWORD_BUTTON = Target("button.MemberProfileForm--changePasswordButton--EzOT4",
                                description="change password button")
CURRENT_PASSWORD = Target("#changePasswordCurrentPassword", description="current password input")
NEW_PASSWORD = Target("#changePasswordNewPassword", description="new password input")
CONFIRM_PASSWORD = Target("#changePasswordConfirmPassword", description="confirm password input")
SAVE = Target(
    'button.Button--primary--I3yI4.MemberChangePasswordForm--submitButton--9cU6R[type="submit"]',
    description="save button",
)
ERROR_HINT = Target('[class*="Error"]', "[data-error]", ".FormError", description="form error")

NOT_SIGNED_IN = dict(skip_if=AVATAR)

FLOW = Flow(
    name="weather",
    site="weather.com",
    description="Change the weather.com member password from Member Settings",
    inputs=INPUTS,
    steps=(
        navigate_to("open-home", "{base_url}/?Goto=Redirected", timeout_ms=45000),
        navigate_to("open-login", "{base_url}/login", timeout_ms=45000, **NOT_SIGNED_IN),
        fill_field("fill-email", LOGIN_EMAIL, "username", secret=False, timeout_ms=20000, **NOT_SIGNED_IN),
        fill_field("fill-password", LOGIN_PASSWORD, "password", timeout_ms=20000, **NOT_SIGNED_IN),
        click_on("submit-login", LOGIN_SUBMIT, navigates=True, **NOT_SIGNED_IN),
        wait_for("confirm-login", AVATAR, timeout_ms=30000,
                 failure_message="Login could not be confirmed: profile avatar never appeared."),
        click_on("open-settings", AVATAR, navigates=True, expect_url="/member/settings",
                 fallback_url="{base_url}/member/settings"),
        click_on("open-change-password", CHANGE_PASSWORD_BUTTON, timeout_ms=20000),
        fill_field("fill-current-password", CURRENT_PASSWORD, "current_password", timeout_ms=20000),
        fill_field("fill-new-password", NEW_PASSWORD, "new_password", timeout_ms=20000),
        fill_field("fill-confirm-password", CONFIRM_PASSWORD, "new_password", timeout_ms=20000),
        click_on("submit-change", SAVE),
        verify(
            "confirm-change", gone(CURRENT_PASSWORD),
            timeout_ms=28000,
            error_hint=ERROR_HINT,
            success_message="Password changed successfully on weather.com",
            failure_message="Password change may have failed. Dialog still present.",
        ),
    ),
)
