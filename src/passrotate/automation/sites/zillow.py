from ...core.models import InputSpec
from ..flow import Flow, navigate_to, fill_field, click_on, verify, gone, url_contains
from ..targets import Target, css, role

INPUTS = (
    InputSpec("email", ("ZILLOW_EMAIL", "ROTATE_EMAIL", "ANCHOR_EMAIL")),
    InputSpec("current_password", ("ZILLOW_CURRENT_PASSWORD", "ROTATE_CURRENT_PASSWORD", "ANCHOR_CURRENT_PASSWORD"),
              secret=True),
    InputSpec("new_password", ("ZILLOW_NEW_PASSWORD", "ROTATE_NEW_PASSWORD", "ANCHOR_NEW_PASSWORD"),
              secret=True),
    InputSpec("start_url", ("ZILLOW_START_URL", "ROTATE_START_URL", "ANCHOR_START_URL"), required=False,
              default="https://www.zillow.com/auth/user/login?entry_point=auth_ui_service_error_page&prompt=login"),
    InputSpec("profile_url", ("ZILLOW_PROFILE_URL", "ROTATE_PROFILE_URL", "ANCHOR_PROFILE_URL"), required=False,
              default="https://www.zillow.com/myzillow/profile/"),
    InputSpec("logout_url", ("ZILLOW_LOGOUT_URL", "ROTATE_LOGOUT_URL", "ANCHOR_LOGOUT_URL"), required=False,
              default="https://www.zillow.com/Logout.htm"),
)

EMAIL = Target('input[data-testid="identifier-input"]', 'input[name="identifier"]', description="email input")
PASSWORD = Target('#password[data-testid="password-input"] input[type="password"]', description="password input")
CHANGE_PASSWORD_BUTTON = Target(css('button[aria-label="Change password"]'), role("button", "^change password$"),
                                description="change password button")
CURRENT_PASSWORD = Target("#current-password-input", description="current password input")
NEW_PASSWORD = Target("#new-password-input", description="new password input")
CONFIRM_PASSWORD = Target("#confirm-password-input", description="confirm password input")
APPLY = Target('form:has(#current-password-input) button[type="submit"]', description="apply button")
PASSWORD_DIALOG = Target('section[role="dialog"]:has(#current-password-input)', description="password dialog")

FLOW = Flow(
    name="zillow",
    site="zillow.com",
    description="Change the Zillow account password from My Profile and log out",
    inputs=INPUTS,
    steps=(
        navigate_to("open-login", "{start_url}"),
        fill_field("submit-email", EMAIL, "email", secret=False, submit_key="Enter",
                   failure_message="Email input not available."),
        fill_field("submit-password", PASSWORD, "current_password", submit_key="Enter",
                   failure_message="Password input not available."),
        navigate_to("open-profile", "{profile_url}"),
        click_on("open-change-password", CHANGE_PASSWORD_BUTTON, attempts=1,
                 failure_message="Change password button not available."),
        fill_field("fill-current-password", CURRENT_PASSWORD, "current_password"),
        fill_field("fill-new-password", NEW_PASSWORD, "new_password"),
        fill_field("fill-confirm-password", CONFIRM_PASSWORD, "new_password"),
        click_on("submit-change", APPLY, attempts=1, failure_message="Apply button not available."),
        # The dialog either closes in place or the site redirects with autosignin=false.
        verify("change-submitted", gone(PASSWORD_DIALOG), url_contains("autosignin=false"),
               timeout_ms=15000, optimistic=True),
        navigate_to("logout", "{logout_url}", optional=True),
        verify(
            "finished", url_contains("zillow.com"),
            timeout_ms=1000,
            optimistic=True,
            success_message="Password change flow executed and logout attempted successfully.",
        ),
    ),
)
