"""Built-in CLI sub-commands for gitcred.

This package groups the Typer command modules that form the CLI's
top-level command tree:

* :mod:`~gitcred.commands.get` -- discover a credential for a URL.
* :mod:`~gitcred.commands.helpers` -- show which keys and helper commands
  a URL resolves to, without running anything.
* :mod:`~gitcred.commands.config` -- view and modify gitcred's own settings.

Single commands (``get``, ``helpers``) are plain callback functions
registered on the root app; ``config`` is a :class:`typer.Typer` group.
"""
