"""
Shared infrastructure: logging set-up and the default error reporter.

Kept outside the prediction core; the session and scheduler only see
the ErrorReporter port.
"""
