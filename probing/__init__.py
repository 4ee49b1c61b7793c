"""
Probes that exercise a source and report what happened.

Modules:
    base: ProbeOutcome, FileReadResult and the persisted status strings
    url_probe: One HTTP request per `url` source
    file_probe: Remote, uploaded or local reads for `file` sources
    dispatcher: SourceProber, which picks the probe and persists the outcome

Usage:
    from probing.dispatcher import SourceProber

    prober = SourceProber(session, settings)
    outcome = await prober.test_url(source_id)
"""

__all__ = [
    "SourceProber",
    "UrlProbe",
    "FileProbe",
    "ProbeOutcome",
    "FileReadResult",
]
