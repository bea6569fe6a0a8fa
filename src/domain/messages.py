"""
User-facing messages surfaced by the credential form.

Kept in one place so the wording can be localized without touching the
state machine. Backend substrings that select a friendlier message are
defined here too.
"""

# Backend error substrings remapped to friendlier text
INVALID_CREDENTIALS_MARKER = "Invalid login credentials"
ALREADY_REGISTERED_MARKER = "already registered"

# Availability checks
CHECK_FAILED = "Could not verify this email: {error}"
CHECK_UNEXPECTED = "Unexpected error while verifying this email. Please try again."
CHECK_RATE_LIMITED = "Too many verification attempts. Please reload the page."

# Submission gate
INVALID_EMAIL = "Invalid email."
SUBMISSION_IN_FLIGHT = "A submission is already in progress."
CHECK_IN_FLIGHT = "Please wait until the email check finishes."
EMAIL_TAKEN = (
    'This email is already registered. Use "Forgot password" or try logging in instead.'
)

# Login
LOGIN_INVALID_CREDENTIALS = "Incorrect email or password. Please check your credentials."
LOGIN_SUCCESS = "Logged in successfully!"

# Registration
PASSWORD_MISMATCH = "Passwords do not match."
PASSWORD_TOO_SHORT = "Password must be at least {min_length} characters long."
FINAL_CHECK_FAILED = "Final email verification failed: {error}"
FINAL_CHECK_UNEXPECTED = "Critical error while verifying your email. Reload the page and try again."
FINAL_CHECK_TAKEN = 'This email is already registered. Use "Forgot password" or log in.'
REGISTER_ALREADY_REGISTERED = "This email is already registered. Please log in."
REGISTER_FAILED = "Registration failed: {error}"
REGISTER_SUCCESS = "Account created successfully! Check your email to confirm it."

# Password recovery
RESET_SUCCESS = "Recovery email sent! Check your inbox."

# Outer boundary
UNEXPECTED_ERROR = "An unexpected error occurred: {error}"
