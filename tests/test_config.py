"""
Tests for configuration loading.
"""

from datetime import time
from pathlib import Path

import pytest
from pydantic import ValidationError

from slotfinder.config import AppConfig, SchedulingParametersConfig, ScheduleConfig

CONFIG_YAML = """
search:
  max_range_days: 14
  page_size: 10

bookings:
  file: bookings.json

schedules:
  - id: dr-smith
    name: Dr. Smith
    timezone: America/New_York
    scheduling_parameters:
      - availability:
          - days_of_week: [Mon, wed]
            times_of_day: ["09:30:00", "13:15:00"]
            duration: 180
        duration: 20
        buffer_before: 10
        alignment_interval: 30
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestAppConfig:
    """Tests for AppConfig."""

    def test_load_from_yaml(self, tmp_path):
        config = AppConfig.load_from_yaml(_write(tmp_path, CONFIG_YAML))

        assert config.search.max_range_days == 14
        assert config.search.max_bookings == 1000
        assert config.bookings.file == tmp_path / "bookings.json"

        schedule = config.find_schedule("dr-smith").to_domain()
        parameters = schedule.wildcard_parameters()

        assert schedule.timezone == "America/New_York"
        assert parameters.duration == 20
        assert parameters.buffer_before == 10
        assert parameters.alignment_interval == 30
        assert parameters.availability[0].days_of_week == ("mon", "wed")
        assert parameters.availability[0].times_of_day == (time(9, 30), time(13, 15))
        assert parameters.availability[0].duration_minutes == 180

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_yaml(tmp_path / "config.yaml")

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(_write(tmp_path, "bookings: [unclosed"))

    def test_root_must_be_mapping(self, tmp_path):
        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(_write(tmp_path, "- a\n- b\n"))

    def test_unknown_schedule(self, tmp_path):
        config = AppConfig.load_from_yaml(_write(tmp_path, CONFIG_YAML))

        with pytest.raises(ValueError, match="Unknown schedule"):
            config.find_schedule("dr-jones")

    def test_requires_exactly_one_booking_source(self):
        with pytest.raises(ValidationError, match="exactly one"):
            AppConfig(bookings={"file": "a.json", "url": "https://fhir.example.com"})

        with pytest.raises(ValidationError, match="exactly one"):
            AppConfig(bookings={})

    def test_duplicate_schedule_ids(self):
        with pytest.raises(ValidationError, match="Duplicate schedule id"):
            AppConfig(
                bookings={"url": "https://fhir.example.com"},
                schedules=[{"id": "a"}, {"id": "a"}],
            )


class TestScheduleConfig:
    """Tests for schedule and parameter validation."""

    def test_unknown_timezone(self):
        with pytest.raises(ValidationError, match="Unknown timezone"):
            ScheduleConfig(id="a", timezone="Mars/Olympus_Mons")

    @pytest.mark.parametrize("alignment", [0, 61])
    def test_alignment_out_of_range(self, alignment):
        with pytest.raises(ValidationError, match="alignment_interval"):
            SchedulingParametersConfig(alignment_interval=alignment)

    def test_unknown_day(self):
        with pytest.raises(ValidationError, match="days_of_week"):
            SchedulingParametersConfig(
                availability=[{"days_of_week": ["funday"], "times_of_day": ["09:00:00"], "duration": 60}]
            )

    def test_empty_days(self):
        with pytest.raises(ValidationError, match="at least one day"):
            SchedulingParametersConfig(
                availability=[{"days_of_week": [], "times_of_day": ["09:00:00"], "duration": 60}]
            )

    def test_non_positive_duration(self):
        with pytest.raises(ValidationError, match="greater than zero"):
            SchedulingParametersConfig(duration=0)
