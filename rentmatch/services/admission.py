"""Admission control for new rent requests.

Admission is a pure function over a snapshot read from the store: the
owner's pending requests and the history of the (owner, tenant) pair. No
counters are kept; every check is recomputed from the records.

Checks run in order and the first failure wins:
1. Pairwise cooldown (rolling window, or "pending request exists")
2. Per-owner quota of pending requests inside the active window
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Literal, Sequence

from rentmatch.adapters.store.base import RentRequest, RequestStatus
from rentmatch.core.config import RequestPolicySettings

DenialReason = Literal["pair_cooldown", "pair_pending", "pending_quota"]

_ONE_HOUR = timedelta(hours=1)


@dataclass(frozen=True)
class AdmissionPolicy:
    """Tunable limits applied by ``evaluate_admission``."""

    cooldown_policy: Literal["rolling", "pending"] = "rolling"
    cooldown: timedelta = timedelta(hours=24)
    max_active_pending: int = 2
    active_window: timedelta = timedelta(hours=24)

    @classmethod
    def from_settings(cls, cfg: RequestPolicySettings) -> "AdmissionPolicy":
        return cls(
            cooldown_policy=cfg.cooldown_policy,
            cooldown=timedelta(hours=cfg.cooldown_hours),
            max_active_pending=cfg.max_active_pending,
            active_window=timedelta(hours=cfg.active_window_hours),
        )


@dataclass(frozen=True)
class AdmissionDecision:
    """Outcome of an admission check.

    Attributes:
        allowed: True when the request may be created.
        reason: Which rule blocked the request.
        hours_remaining: Whole hours until the blocking rule lifts (>= 1).
        next_available_at: The instant the blocking rule is computed to lift.
        message: Human-readable explanation for the caller.
    """

    allowed: bool
    reason: DenialReason | None = None
    hours_remaining: int | None = None
    next_available_at: datetime | None = None
    message: str | None = None

    @classmethod
    def admit(cls) -> "AdmissionDecision":
        return cls(allowed=True)


def hours_until(target: datetime, now: datetime) -> int:
    """Ceil the time left until ``target`` to whole hours, never below 1.

    A fraction of an hour counts as a full hour so a blocked caller is never
    told zero hours remain.
    """
    return max(1, math.ceil((target - now) / _ONE_HOUR))


def _deny(reason: DenialReason, anchor: RentRequest, window: timedelta, now: datetime, message: str) -> AdmissionDecision:
    target = anchor.created_at + window
    hours = hours_until(target, now)
    return AdmissionDecision(
        allowed=False,
        reason=reason,
        hours_remaining=hours,
        next_available_at=target,
        message=message.format(hours=hours),
    )


def _check_pair(pair_history: Sequence[RentRequest], now: datetime, policy: AdmissionPolicy) -> AdmissionDecision | None:
    if not pair_history:
        return None

    if policy.cooldown_policy == "pending":
        pending = [r for r in pair_history if r.status is RequestStatus.PENDING]
        if not pending:
            return None
        latest = max(pending, key=lambda r: r.created_at)
        return _deny(
            "pair_pending",
            latest,
            policy.cooldown,
            now,
            "You already have a pending request to this tenant. Try again in {hours} hour(s).",
        )

    latest = max(pair_history, key=lambda r: r.created_at)
    if latest.created_at > now - policy.cooldown:
        return _deny(
            "pair_cooldown",
            latest,
            policy.cooldown,
            now,
            "You can send a new request to this tenant after {hours} hour(s).",
        )
    return None


def _check_quota(owner_pending: Sequence[RentRequest], now: datetime, policy: AdmissionPolicy) -> AdmissionDecision | None:
    pending = sorted(
        (r for r in owner_pending if r.status is RequestStatus.PENDING),
        key=lambda r: r.created_at,
    )
    window_start = now - policy.active_window
    active = [r for r in pending if r.created_at > window_start]
    if len(active) < policy.max_active_pending:
        return None

    # The wait is measured from the oldest pending request overall.
    return _deny(
        "pending_quota",
        pending[0],
        policy.active_window,
        now,
        f"Maximum {policy.max_active_pending} pending requests allowed. "
        "You can send more requests in {hours} hour(s).",
    )


def evaluate_admission(
    pair_history: Sequence[RentRequest],
    owner_pending: Sequence[RentRequest],
    now: datetime,
    policy: AdmissionPolicy | None = None,
) -> AdmissionDecision:
    """Decide whether an owner may send a new request to a tenant.

    Args:
        pair_history: Every request for the (owner, tenant) pair, any order.
        owner_pending: The owner's requests; non-pending entries are ignored.
        now: Evaluation instant.
        policy: Limits to apply; defaults to ``AdmissionPolicy()``.

    Returns:
        AdmissionDecision describing the outcome and, when denied, the wait.
    """
    policy = policy or AdmissionPolicy()
    return (
        _check_pair(pair_history, now, policy)
        or _check_quota(owner_pending, now, policy)
        or AdmissionDecision.admit()
    )
