"""
Toolkit errors

Every error the CLI reports is a ToolkitError: it names the component
that failed and, where one exists, a recovery hint for the user.
"""


class ToolkitError(Exception):
    """
    Base exception for all toolkit errors

    Attributes:
        message: Error message without component or hint
        component: Part of the toolkit that failed (Capture, Comparison, ...)
        recovery_hint: What the user can do about it
    """

    def __init__(self, message: str, component: str = "", recovery_hint: str = ""):
        self.message = message
        self.component = component
        self.recovery_hint = recovery_hint
        super().__init__(message)

    def __str__(self) -> str:
        text = self.message
        if self.component:
            text = f"[{self.component}] {text}"
        if self.recovery_hint:
            text += f"\n💡 Recovery: {self.recovery_hint}"
        return text


class ConfigurationError(ToolkitError):
    """Invalid SCREENSHOT_TOOLKIT_* settings"""

    def __init__(self, message: str):
        super().__init__(
            message,
            component="Configuration",
            recovery_hint="Check your .env file and SCREENSHOT_TOOLKIT_* variables",
        )


class ValidationError(ToolkitError):
    """Bad user input, such as a link that is not a Figma file"""

    def __init__(self, message: str, recovery_hint: str = ""):
        super().__init__(message, component="Validation", recovery_hint=recovery_hint)


class CaptureError(ToolkitError):
    """Browser launch, page load or screenshot failed"""

    def __init__(self, message: str, recovery_hint: str = ""):
        super().__init__(
            message,
            component="Capture",
            recovery_hint=recovery_hint or "Check the URL is reachable and Playwright browsers are installed",
        )
