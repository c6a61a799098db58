"""Command line interface for subgloss.

* :mod:`subgloss.cli.args` builds the argument parser.
* :mod:`subgloss.cli.main` wires configuration, dictionary, tokenizer and the
  annotation worker together and is the ``subgloss`` console script.
"""

from . import args

__all__ = ["args"]
