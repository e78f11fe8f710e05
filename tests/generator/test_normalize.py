"""Test shared VRL fragments and the throttle factory."""

import pytest

from logforward.generator import Throttle
from logforward.generator.normalize import add_log_type, join_vrl, new_throttle

pytestmark = pytest.mark.unit


def test_add_log_type():
    assert add_log_type("audit") == '.log_type = "audit"'


def test_join_vrl_trims_and_skips_blank():
    assert join_vrl("  .a = 1 ", "", "\n.b = 2\n") == ".a = 1\n.b = 2"


class TestNewThrottle:

    def test_positive_threshold(self):
        (throttle,) = new_throttle("t", ["in"], 10, "{{ file }}", 2)

        assert isinstance(throttle, Throttle)
        assert throttle.inputs == ("in",)
        assert throttle.threshold == 10
        assert throttle.key_field == "{{ file }}"
        assert throttle.window_secs == 2

    @pytest.mark.parametrize("threshold", [0, -5])
    def test_non_positive_threshold_emits_nothing(self, threshold):
        assert new_throttle("t", ["in"], threshold) == []

    def test_unkeyed_throttle_renders_without_key(self):
        (throttle,) = new_throttle("t", ["in"], 1)
        assert "key_field" not in throttle.to_config()
