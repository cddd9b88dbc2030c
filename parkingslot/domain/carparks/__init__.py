# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import Carpark
from .repositories import CarparkRepository

__all__ = ["Carpark", "CarparkRepository"]
