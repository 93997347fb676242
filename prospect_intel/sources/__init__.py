from .base import SourceAdapter, detect_tech_stack
from .linkedin import LinkedInJobsSource
from .multi import MultiSource
from .remotive import RemotiveSource
from .sample import SampleSource

from prospect_intel.log import get_logger

log = get_logger(__name__)

__all__ = [
    "SourceAdapter", "SampleSource", "RemotiveSource", "LinkedInJobsSource",
    "MultiSource", "detect_tech_stack", "get_sources",
]


def get_sources(settings) -> SourceAdapter:
    """Build the configured adapters; a single one is returned unwrapped."""
    delay = (settings.delay_min_ms, settings.delay_max_ms)
    sources: list[SourceAdapter] = []

    for name in settings.sources:
        if name == "sample":
            sources.append(SampleSource())
            log.info("Registered source: sample directory")
        elif name == "remotive":
            sources.append(RemotiveSource(delay_ms=delay))
            log.info("Registered source: Remotive (free, remote jobs)")
        elif name == "linkedin":
            sources.append(LinkedInJobsSource(headless=settings.headless, delay_ms=delay))
            log.info("Registered source: LinkedIn job search (browser)")
        else:
            log.warning("Unknown source %r ignored", name)

    if not sources:
        sources.append(SampleSource())
        log.info("No usable sources configured, using SampleSource")

    return sources[0] if len(sources) == 1 else MultiSource(sources)
