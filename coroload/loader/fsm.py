from __future__ import annotations

from enum import StrEnum

from statemachine import State, StateMachine


class LoadPhase(StrEnum):
    pending = "pending"
    executed = "executed"
    loaded = "loaded"
    failed = "failed"


class LoadFSM(StateMachine):
    """Lifecycle of one in-flight module fetch.

    pending -> executed (script ran) -> loaded (exports defined)
    pending | executed -> failed

    A load reaches exactly one final state; any later transition raises
    `statemachine.exceptions.TransitionNotAllowed`.
    """

    pending = State(LoadPhase.pending.value, value=LoadPhase.pending.value, initial=True)
    executed = State(LoadPhase.executed.value, value=LoadPhase.executed.value)
    loaded = State(LoadPhase.loaded.value, value=LoadPhase.loaded.value, final=True)
    failed = State(LoadPhase.failed.value, value=LoadPhase.failed.value, final=True)

    script_executed = pending.to(executed)
    module_defined = pending.to(loaded) | executed.to(loaded)
    load_failed = pending.to(failed) | executed.to(failed)

    @property
    def phase(self) -> LoadPhase:
        return LoadPhase(str(self.current_state.value))

    @property
    def settled(self) -> bool:
        return self.phase in (LoadPhase.loaded, LoadPhase.failed)
