"""
Ejectd - External Drive Ejector
-------------------------------

Lists the external block devices attached to a Linux host and safely unmounts and
powers off the one the operator picks. All the real work is done by ``lsblk``,
``findmnt`` and ``udisksctl``; this package parses their output and drives them.

Version: 1.0.0 | License: MIT
"""

__version__ = "1.0.0"
