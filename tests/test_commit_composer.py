"""Tests for commit message composition."""

from __future__ import annotations

import asyncio
import logging

from architect.commit import CommitComposer
from architect.models import DiffPayload
from architect.prompting.builder import COMMIT_SYSTEM_ROLE

from tests._fixtures.fakes import FakeProvider

DIFF = DiffPayload(text="diff --git a/app.ts b/app.ts\n+export const x = 1;\n", source="staged")


def test_compose_trims_reply_and_embeds_diff() -> None:
    provider = FakeProvider(reply="\n  feat(app): export x constant\n\n")

    message = asyncio.run(CommitComposer(provider).compose(DIFF))

    assert message.text == "feat(app): export x constant"
    assert message.is_conventional
    system_role, prompt = provider.calls[0]
    assert system_role == COMMIT_SYSTEM_ROLE
    assert prompt.endswith("Diff:\n" + DIFF.text)


def test_non_conventional_reply_is_returned_with_warning(caplog, monkeypatch) -> None:
    monkeypatch.setattr(logging.getLogger("architect"), "propagate", True)
    provider = FakeProvider(reply="Updated some stuff")

    with caplog.at_level(logging.WARNING, logger="architect"):
        message = asyncio.run(CommitComposer(provider).compose(DIFF))

    assert message.text == "Updated some stuff"
    assert not message.is_conventional
    assert "Conventional Commits" in caplog.text
