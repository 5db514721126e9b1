"""The ``teffmarket`` protean domain.

Every aggregate, command, handler and repository in the package registers
itself against this object; ``teffmarket.init()`` walks the package and wires
them up using ``domain.toml`` next to this file.
"""

from protean.domain import Domain

from teffmarket.utils.logging import configure_logging

configure_logging(log_file_prefix="teffmarket")

teffmarket = Domain(name="teffmarket")
