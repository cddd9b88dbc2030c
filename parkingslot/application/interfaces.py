# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(slots=True, frozen=True)
class EmailMessage:
    to_email: str
    subject: str
    html_body: str
    to_name: str | None = None


class EmailSender(Protocol):
    async def send(self, message: EmailMessage) -> None: ...
