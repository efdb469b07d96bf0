"""topgrade package.

Upgrade everything on a personal machine in one go:

    $ topgrade
    $ topgrade --no-system
    $ topgrade --tmux

Steps run one after another; a failing step is recorded and the run goes
on. The exit code is 0 only when every recorded step succeeded.
"""

__version__ = "0.1.0"
