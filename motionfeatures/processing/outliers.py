"""
Per-window validity annotations derived from the gravity reference stream.

Windows are built with the same trim and segmentation as the sensor
pipelines so that annotation indices line up with feature-table windows.
"""
from __future__ import annotations

import functools
import logging

import numpy as np

from motionfeatures.core import (
    AXES,
    GravityPolicy,
    Ok,
    PipelineConfig,
    ReadingStream,
    Result,
    Window,
    chain,
    join_errors,
    segment,
)

from .preprocess import tidy, trim

logger = logging.getLogger(__name__)

ROTATION_REASON = "Phone rotated within window"
MAGNITUDE_REASON = "Gravity magnitude out of range"


def window_tag(window: Window, policy: GravityPolicy) -> str | None:
    """Reason the window is suspect, or None if it looks valid."""
    reasons = []
    samples = window.samples
    if policy.rotation and samples.n:
        for a in AXES:
            v = samples.axis(a)
            if np.sign(v.max()) != np.sign(v.min()):
                reasons.append(ROTATION_REASON)
                break

    if policy.magnitude_tolerance is not None and samples.n:
        magnitude = np.sqrt(samples.x ** 2 + samples.y ** 2 + samples.z ** 2).mean()
        if abs(magnitude - policy.reference_g) > policy.magnitude_tolerance:
            reasons.append(MAGNITUDE_REASON)

    return join_errors(*reasons)


def tag_outlier_windows(
    gravity: ReadingStream | None,
    config: PipelineConfig,
    policy: GravityPolicy | None = None,
) -> Result[dict[int, str | None]]:
    """
    Map window index -> suspect reason (None when valid).

    Without a gravity stream there is nothing to flag and the map is empty.
    """
    if gravity is None:
        return Ok({})
    policy = policy if policy is not None else GravityPolicy()

    def tag(windows: list[Window]) -> Result[dict[int, str | None]]:
        tags = {w.index: window_tag(w, policy) for w in windows}
        flagged = sum(1 for reason in tags.values() if reason is not None)
        logger.info("Gravity: %d of %d window(s) flagged", flagged, len(tags))
        return Ok(tags)

    return chain(
        tidy(gravity),
        functools.partial(trim, time_range=config.time_range),
        lambda s: Ok(segment(s, config.window_length, config.overlap)),
        tag,
    )
