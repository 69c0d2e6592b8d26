from cac.config.models import JobConfig
from cac.domain.models import Decision, FileCandidate


def is_eligible(extension: str, config: JobConfig) -> bool:
    # An allow-list takes precedence; the deny-list only applies without one.
    if config.sources:
        return extension in config.sources
    if config.excepts:
        return extension not in config.excepts
    return True


def classify(candidate: FileCandidate, config: JobConfig) -> Decision:
    """Decides what to do with a candidate. Pure and total."""
    if not is_eligible(candidate.extension, config):
        return Decision.SKIP
    if candidate.extension == config.target_extension:
        return Decision.RELOCATE
    return Decision.CONVERT
