# SPDX-FileCopyrightText: 2025-present DouglasMacKrell <d.mackrell@gmail.com>
#
# SPDX-License-Identifier: MIT

"""mediaxid - Image and external-ID helpers for media metadata services."""

from mediaxid.__about__ import __version__

__all__ = ["__version__"]
