"""Scheduling subsystem: per-owner named task queues driven by ticks.

Public API:
- Engine: Append, bypass, lock and owner teardown operations
- TickScheduler: Synchronous host that resumes live routines once per tick
- AsyncTickDriver: Drives a TickScheduler from an asyncio task

Types:
- TaskDescriptor: One enqueued unit of work (one-shot or loop)
- ExecutionHandle: Control object passed to handle-aware callbacks
- WaitSeconds / WaitTicks / WaitUntil: Suspension conditions
"""

from steep.scheduling.engine import Engine
from steep.scheduling.executor import (
    BoundedLoopExecutor,
    OneShotExecutor,
    UnboundedLoopExecutor,
    build_executor,
)
from steep.scheduling.handle import ExecutionHandle
from steep.scheduling.host import AsyncTickDriver, TickScheduler
from steep.scheduling.registry import DEFAULT_QUEUE_NAME, QueueRegistry
from steep.scheduling.runner import DrainPass, QueueRunner
from steep.scheduling.types import (
    HandleAction,
    PlainAction,
    TaskDescriptor,
    TaskKind,
    TaskState,
)
from steep.scheduling.waits import (
    Suspension,
    WaitSeconds,
    WaitTicks,
    WaitUntil,
    as_suspension,
)

__all__ = [
    "DEFAULT_QUEUE_NAME",
    "AsyncTickDriver",
    "BoundedLoopExecutor",
    "DrainPass",
    "Engine",
    "ExecutionHandle",
    "HandleAction",
    "OneShotExecutor",
    "PlainAction",
    "QueueRegistry",
    "QueueRunner",
    "Suspension",
    "TaskDescriptor",
    "TaskKind",
    "TaskState",
    "TickScheduler",
    "UnboundedLoopExecutor",
    "WaitSeconds",
    "WaitTicks",
    "WaitUntil",
    "as_suspension",
    "build_executor",
]
