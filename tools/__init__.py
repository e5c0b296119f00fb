"""
Helper scripts for magick-recipes maintainers.

The tools package contains stand-alone utilities that support the
recipes without being part of them, such as refreshing the local
mirror of the upstream effect scripts.

Modules in this package are intended for developer use and are not
required by the core library.
"""
