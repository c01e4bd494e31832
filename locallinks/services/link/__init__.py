"""Link service module with validation, propagation and reporting components."""

from locallinks.services.link.propagation import PropagationSource, StatusPropagator
from locallinks.services.link.reporting import LinkReporter
from locallinks.services.link.validation import LinkValidator

__all__ = ["LinkValidator", "LinkReporter", "StatusPropagator", "PropagationSource"]
