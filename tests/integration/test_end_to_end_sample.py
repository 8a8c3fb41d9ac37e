"""
End-to-End Tests on the synthetic registry sample.

Tests cover:
    - 256 Hawaii / 249 Idaho cohort from a wide CSV
    - Gender share reported as 39% female
    - Outlier exclusion in the age summary
    - Extract write / re-read / re-filter round trip
    - Command-line entry point
"""

from __future__ import annotations

from collections import Counter
from pathlib import Path

import pandas as pd
import pytest

from provider_cohort.adapters.csv_provider import read_extract, to_extract_row
from provider_cohort.cli import main
from provider_cohort.config.models import CohortConfig
from provider_cohort.domain.entities import CohortRunResult
from provider_cohort.filters.record_filter import filter_cohort_candidates
from provider_cohort.filters.specialty_filter import select_primary_specialty
from provider_cohort.pipeline.cohort_pipeline import create_pipeline
from tests.fixtures.registry_data import (
    FEMALE_COUNT,
    HI_COUNT,
    ID_COUNT,
    build_registry_rows,
)


@pytest.fixture
def registry_csv(tmp_path: Path) -> Path:
    path = tmp_path / "registry.csv"
    pd.DataFrame(build_registry_rows()).to_csv(path, index=False)
    return path


@pytest.fixture
def run_result(registry_csv: Path, tmp_path: Path) -> CohortRunResult:
    pipeline = create_pipeline(CohortConfig())
    return pipeline.run(registry_csv, extract_path=tmp_path / "cohort.csv")


class TestSampleCohort:
    """The narrative sample reproduced end to end."""

    def test_count_by_state(self, run_result: CohortRunResult) -> None:
        """
        SCENARIO: 256 HI and 249 ID qualifying providers plus noise rows
        EXPECTED: {HI: 256, ID: 249}, total 505
        """
        assert run_result.report.count_by_state == {"HI": HI_COUNT, "ID": ID_COUNT}
        assert run_result.report.total == 505
        assert run_result.input_count == 505 + 6

    def test_no_duplicate_providers(self, run_result: CohortRunResult) -> None:
        counts = Counter(o.provider_id for o in run_result.cohort)

        assert len(counts) == 505
        assert set(counts.values()) == {1}

    def test_gender_share(self, run_result: CohortRunResult) -> None:
        """
        SCENARIO: 197 female and 308 male providers
        EXPECTED: female share rounds to 0.39 (39%), shares sum to 1
        """
        report = run_result.report

        assert report.gender_counts == {"female": FEMALE_COUNT, "male": 505 - FEMALE_COUNT}
        assert report.gender_percentages["female"] == 0.39
        assert report.gender_percentages["male"] == 0.61
        assert abs(sum(report.gender_percentages.values()) - 1.0) <= 0.01

    def test_gender_share_within_state(self, run_result: CohortRunResult) -> None:
        for state in ("HI", "ID"):
            shares = [
                pct
                for (s, _), pct in run_result.report.gender_percentages_by_state.items()
                if s == state
            ]
            assert abs(sum(shares) - 1.0) <= 0.01

    def test_age_outlier_excluded(self, run_result: CohortRunResult) -> None:
        age = run_result.report.age_overall

        assert age.excluded == 1
        assert age.n == 504
        assert age.mean is not None and 30 <= age.mean <= 65
        assert age.std_dev is not None
        assert run_result.report.age_by_state["HI"].excluded == 1
        assert run_result.report.age_by_state["ID"].excluded == 0

    def test_noise_rows_rejected(self, run_result: CohortRunResult) -> None:
        record_stage = run_result.stage("cohort_candidate_filter")

        assert set(record_stage.filter_reasons) == {
            "1900000001",
            "1900000002",
            "1900000003",
        }
        cohort_ids = {o.provider_id for o in run_result.cohort}
        assert not cohort_ids & {"1900000004", "1900000005", "1900000006"}


class TestExtractRoundTrip:
    """The written extract is an idempotent snapshot of the cohort."""

    def test_reread_matches_cohort(self, run_result: CohortRunResult) -> None:
        reread = read_extract(run_result.metadata["extract_path"])

        assert [to_extract_row(o) for o in reread] == [
            to_extract_row(o) for o in run_result.cohort
        ]

    def test_refiltering_extract_is_identity(self, run_result: CohortRunResult) -> None:
        """
        SCENARIO: Apply the same predicates to the re-read extract
        EXPECTED: Nothing is removed
        """
        config = CohortConfig()
        reread = read_extract(run_result.metadata["extract_path"])

        refiltered = select_primary_specialty(
            filter_cohort_candidates(
                reread,
                set(config.record_filter.states),
                config.record_filter.min_update_year,
            ),
            set(config.specialty_filter.target_codes),
        )

        assert refiltered == reread


class TestCommandLine:

    def test_main_writes_extract(self, registry_csv: Path, tmp_path: Path, capsys) -> None:
        output = tmp_path / "out" / "cohort.csv"

        exit_code = main([str(registry_csv), "--output", str(output)])

        assert exit_code == 0
        assert len(pd.read_csv(output)) == 505
        out = capsys.readouterr().out
        assert "Providers by State" in out
        assert "39%" in out

    def test_main_reports_malformed_input(self, tmp_path: Path, capsys) -> None:
        path = tmp_path / "bad.csv"
        rows = build_registry_rows()[:3]
        rows[1]["last_updated"] = "31/31/2015"
        pd.DataFrame(rows).to_csv(path, index=False)

        exit_code = main([str(path)])

        assert exit_code == 2
        assert "last_updated" in capsys.readouterr().out

    def test_main_reports_missing_input(self, tmp_path: Path, capsys) -> None:
        """
        SCENARIO: Input CSV path does not exist
        EXPECTED: Error printed and exit code 2, no traceback
        """
        exit_code = main([str(tmp_path / "nope.csv")])

        assert exit_code == 2
        assert "Error" in capsys.readouterr().out

    def test_main_reports_missing_profile(
        self, registry_csv: Path, sample_config_path: Path, capsys
    ) -> None:
        exit_code = main(
            [str(registry_csv), "-c", str(sample_config_path), "-p", "nonexistent"]
        )

        assert exit_code == 2
        assert "Profile not found" in capsys.readouterr().out

    def test_profile_requires_config(self, registry_csv: Path) -> None:
        """
        SCENARIO: --profile given without --config
        EXPECTED: Usage error (argparse exits with status 2)
        """
        with pytest.raises(SystemExit) as exc_info:
            main([str(registry_csv), "--profile", "lenient"])

        assert exc_info.value.code == 2

    def test_shipped_profile_from_other_directory(
        self,
        registry_csv: Path,
        sample_config_path: Path,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(tmp_path)

        exit_code = main(
            [str(registry_csv), "-c", str(sample_config_path), "-p", "lenient"]
        )

        assert exit_code == 0
