"""
Tests for Timer.
"""

import pytest

from pyinctools.core.compute.timing import Timer


class TestTimer:

    def test_sections_accumulate(self):
        timer = Timer()
        timer.start()
        with timer.section('sampling'):
            pass
        with timer.section('sampling'):
            pass
        timer.stop()
        result = timer.result()
        assert set(result) == {'total_seconds', 'sampling'}
        assert result['sampling'] >= 0.0
        assert result['total_seconds'] >= result['sampling']

    def test_section_recorded_on_error(self):
        timer = Timer()
        timer.start()
        with pytest.raises(ValueError):
            with timer.section('sampling'):
                raise ValueError("boom")
        timer.stop()
        assert 'sampling' in timer.result()

    def test_stop_before_start(self):
        with pytest.raises(RuntimeError, match="before start"):
            Timer().stop()

    def test_result_before_stop(self):
        timer = Timer()
        timer.start()
        with pytest.raises(RuntimeError, match="before stop"):
            timer.result()
