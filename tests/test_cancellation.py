"""Tests for cooperative cancellation."""

from __future__ import annotations

import pytest

from architect.cancellation import CancellationContext, FlowCancelled


def test_checkpoint_passes_until_cancelled() -> None:
    token = CancellationContext()
    token.checkpoint("discovery")
    assert token.cancelled is False

    token.cancel()
    assert token.cancelled is True
    with pytest.raises(FlowCancelled) as excinfo:
        token.checkpoint("synthesis")
    assert excinfo.value.checkpoint == "synthesis"
    assert "synthesis" in str(excinfo.value)
