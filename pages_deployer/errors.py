"""Failure taxonomy for the deployment pipeline.

Only ``AuthRejected`` ever reaches an HTTP caller. Everything else happens
after the task was acknowledged and ends up in the logs.
"""

class DeployError(Exception):
    pass

class AuthRejected(DeployError):
    pass

class GenerationFailed(DeployError):
    pass

class ProvisioningFailed(DeployError):
    pass

class PublishFailed(DeployError):
    """One of the commit construction steps failed.

    ``step`` is one of ``blob``, ``tree``, ``commit`` or ``ref``.
    """

    def __init__(self, step: str, message: str):
        super().__init__(f"{step}: {message}")
        self.step = step

class ActivationFailed(DeployError):
    pass

class DeliveryFailed(DeployError):
    def __init__(self, url: str, attempts: int):
        super().__init__(f"gave up notifying {url} after {attempts} attempts")
        self.url = url
        self.attempts = attempts
