"""Unit tests for job folder naming and allocation."""

from datetime import date
from pathlib import Path

import pytest

from joblogger.contexts.filing import folders
from joblogger.contexts.filing.folders import (
    FALLBACK_FOLDER_NAME,
    MAX_FOLDER_NAME_LENGTH,
    allocate_job_folder,
    candidate_folder,
    generate_folder_name,
    sanitize_folder_name,
)
from joblogger.exceptions import (
    BasePathNotFoundError,
    ErrorCode,
    FolderAccessDeniedError,
    FolderCreateError,
)


@pytest.mark.unit
class TestSanitizeFolderName:
    @pytest.mark.parametrize("char", list('<>:"/\\|?*'))
    def test_invalid_characters_replaced(self, char):
        assert sanitize_folder_name(f"Acme{char}Corp") == "Acme_Corp"

    def test_all_invalid_characters(self):
        assert sanitize_folder_name('a<b>c:d"e/f\\g|h?i*j') == "a_b_c_d_e_f_g_h_i_j"

    def test_whitespace_collapsed_and_trimmed(self):
        assert sanitize_folder_name("  Acme \t Corp\n-  Engineer  ") == "Acme Corp - Engineer"

    def test_truncated_to_max_length(self):
        result = sanitize_folder_name("x" * 400)
        assert result == "x" * MAX_FOLDER_NAME_LENGTH

    def test_truncation_exposing_space_is_trimmed(self):
        name = "a" * (MAX_FOLDER_NAME_LENGTH - 1) + " tail"
        assert sanitize_folder_name(name) == "a" * (MAX_FOLDER_NAME_LENGTH - 1)

    @pytest.mark.parametrize("name", ["", "   ", "\n\t", None])
    def test_blank_uses_fallback(self, name):
        assert sanitize_folder_name(name) == FALLBACK_FOLDER_NAME

    @pytest.mark.parametrize(
        "name",
        [
            '2025-03-14 Acme: R&D - "Lead" Engineer?',
            "  many   spaces  ",
            "y" * 151 + " z",
            "C:\\Users\\me\\Jobs",
        ],
    )
    def test_idempotent(self, name):
        once = sanitize_folder_name(name)
        assert sanitize_folder_name(once) == once

    def test_keeps_unicode(self):
        assert sanitize_folder_name("Société Générale – Analyst") == "Société Générale – Analyst"


@pytest.mark.unit
class TestGenerateFolderName:
    def test_format(self):
        name = generate_folder_name("Acme Corp", "Data Engineer", on_date=date(2025, 3, 14))
        assert name == "2025-03-14 Acme Corp - Data Engineer"

    def test_defaults_to_today(self):
        expected_prefix = date.today().strftime("%Y-%m-%d")
        assert generate_folder_name("Acme", "Engineer").startswith(expected_prefix + " ")


@pytest.mark.unit
class TestAllocateJobFolder:
    def test_creates_folder(self, base_folder):
        folder = allocate_job_folder(base_folder, "Acme - Engineer")

        assert folder.is_dir()
        assert folder.name == "Acme - Engineer"
        assert folder.parent == base_folder
        assert folder.is_absolute()

    def test_accepts_string_base(self, base_folder):
        folder = allocate_job_folder(str(base_folder), "Acme")
        assert folder == base_folder / "Acme"

    def test_sanitized_name_used_exactly(self, base_folder):
        name = sanitize_folder_name('2025-03-14 Acme: "R&D" / Lead?')
        folder = allocate_job_folder(base_folder, name)
        assert folder.name == "2025-03-14 Acme_ _R&D_ _ Lead_"

    def test_collision_gets_next_number(self, base_folder):
        (base_folder / "X").mkdir()
        (base_folder / "X (2)").mkdir()

        assert allocate_job_folder(base_folder, "X").name == "X (3)"

    def test_repeated_allocation_numbers_in_order(self, base_folder):
        names = [allocate_job_folder(base_folder, "Acme").name for _ in range(3)]
        assert names == ["Acme", "Acme (2)", "Acme (3)"]

    def test_existing_file_counts_as_taken(self, base_folder):
        (base_folder / "Acme").write_text("not a folder")
        assert allocate_job_folder(base_folder, "Acme").name == "Acme (2)"

    def test_missing_base(self, tmp_path):
        with pytest.raises(BasePathNotFoundError) as exc_info:
            allocate_job_folder(tmp_path / "nowhere", "Acme")

        assert exc_info.value.error_code is ErrorCode.BASE_PATH_NOT_FOUND
        assert not (tmp_path / "nowhere").exists()

    def test_base_that_is_a_file(self, tmp_path):
        base = tmp_path / "jobs.txt"
        base.write_text("")

        with pytest.raises(BasePathNotFoundError):
            allocate_job_folder(base, "Acme")

    def test_folder_created_concurrently_moves_to_next_number(self, base_folder, monkeypatch):
        original_mkdir = Path.mkdir
        calls = []

        def racing_mkdir(self, *args, **kwargs):
            calls.append(self.name)
            if len(calls) == 1:
                # Another process wins the race for the first name
                original_mkdir(self, *args, **kwargs)
                raise FileExistsError(str(self))
            return original_mkdir(self, *args, **kwargs)

        monkeypatch.setattr(Path, "mkdir", racing_mkdir)
        folder = allocate_job_folder(base_folder, "Acme")

        assert calls == ["Acme", "Acme (2)"]
        assert folder.name == "Acme (2)"

    def test_permission_denied(self, base_folder, monkeypatch):
        def denied(self, *args, **kwargs):
            raise PermissionError(13, "Permission denied", str(self))

        monkeypatch.setattr(Path, "mkdir", denied)

        with pytest.raises(FolderAccessDeniedError) as exc_info:
            allocate_job_folder(base_folder, "Acme")
        assert exc_info.value.error_code is ErrorCode.ACCESS_DENIED

    def test_other_os_error(self, base_folder, monkeypatch):
        def disk_full(self, *args, **kwargs):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(Path, "mkdir", disk_full)

        with pytest.raises(FolderCreateError) as exc_info:
            allocate_job_folder(base_folder, "Acme")
        assert exc_info.value.error_code is ErrorCode.FOLDER_CREATE_FAILED
        assert "No space left on device" in exc_info.value.message

    def test_name_with_nul_byte(self, base_folder):
        with pytest.raises(FolderCreateError) as exc_info:
            allocate_job_folder(base_folder, "Acme\x00Corp")

        assert exc_info.value.error_code is ErrorCode.FOLDER_CREATE_FAILED
        assert list(base_folder.iterdir()) == []

    def test_attempts_are_bounded(self, base_folder, monkeypatch):
        monkeypatch.setattr(folders, "MAX_ALLOCATION_ATTEMPTS", 3)
        for counter in range(1, 4):
            candidate_folder(base_folder, "Acme", counter).mkdir()

        with pytest.raises(FolderCreateError):
            allocate_job_folder(base_folder, "Acme")


@pytest.mark.unit
def test_candidate_folder_numbering(tmp_path):
    assert candidate_folder(tmp_path, "Acme", 1) == tmp_path / "Acme"
    assert candidate_folder(tmp_path, "Acme", 2) == tmp_path / "Acme (2)"
    assert candidate_folder(tmp_path, "Acme", 12) == tmp_path / "Acme (12)"
