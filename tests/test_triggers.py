from __future__ import annotations

from pyiterate.models.response import Survey, Trigger
from pyiterate.state.reducer import DisplayKind
from pyiterate.triggers import display_kind_for, resolve_display_delay


def _trigger(payload: dict[str, object]) -> Trigger:
    return Trigger.model_validate(payload)


class TestResolveDisplayDelay:
    def test_no_triggers_is_immediate(self) -> None:
        assert resolve_display_delay([]) is None

    def test_non_timed_trigger_is_immediate(self) -> None:
        assert resolve_display_delay([_trigger({"type": "immediately"})]) is None

    def test_unknown_trigger_type_is_immediate(self) -> None:
        assert resolve_display_delay([_trigger({"type": "exit_intent", "options": {"seconds": 3}})]) is None

    def test_seconds_trigger_uses_option(self) -> None:
        assert resolve_display_delay([_trigger({"type": "seconds", "options": {"seconds": 5}})]) == 5.0

    def test_seconds_trigger_without_option_defaults_to_zero(self) -> None:
        assert resolve_display_delay([_trigger({"type": "seconds"})]) == 0.0
        assert resolve_display_delay([_trigger({"type": "seconds", "options": {"seconds": 0}})]) == 0.0

    def test_only_first_trigger_is_consulted(self) -> None:
        triggers = [
            _trigger({"type": "seconds", "options": {"seconds": 3}}),
            _trigger({"type": "seconds", "options": {"seconds": 9}}),
        ]
        assert resolve_display_delay(triggers) == 3.0

        triggers = [
            _trigger({"type": "immediately"}),
            _trigger({"type": "seconds", "options": {"seconds": 9}}),
        ]
        assert resolve_display_delay(triggers) is None


class TestDisplayKindFor:
    def test_prompt_when_present(self) -> None:
        assert display_kind_for(Survey.model_validate({"id": "1", "prompt": {}})) == DisplayKind.PROMPT

    def test_survey_when_prompt_absent(self) -> None:
        assert display_kind_for(Survey.model_validate({"id": "1", "prompt": None})) == DisplayKind.SURVEY
