"""Stage-tagged errors raised by the publish pipeline."""


class DeployError(Exception):
    """Raised when a pipeline stage fails fatally.

    Callers get a single error naming the failing stage; the underlying
    exception, if any, is chained as ``__cause__``.

    Args:
        message: Human-readable error description.
        stage: Overrides the class-level stage name (``config``, ``staging``,
            ``publish``, ``dns`` or ``record``).
    """

    stage = "deploy"

    def __init__(self, message: str, *, stage: str | None = None) -> None:
        if stage is not None:
            self.stage = stage
        self.message = message
        super().__init__(f"{self.stage}: {message}")


class ConfigResolutionError(DeployError):
    """The network's config reference could not be resolved or validated."""

    stage = "config"


class StagingError(DeployError):
    """Assembling the publishable directory failed."""

    stage = "staging"


class PublishFailedError(DeployError):
    """A publish backend was configured but no content identifier came back."""

    stage = "publish"


class DnsUpdateError(DeployError):
    """The DNS provider rejected or failed the record update."""

    stage = "dns"


class RecordError(DeployError):
    """The deployment record could not be persisted."""

    stage = "record"
