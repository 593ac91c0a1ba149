"""Tests for area ownership resolution and repository scanning."""

from pathlib import Path

from condenser_cli.models import AreaDefinition, ProjectConfig
from condenser_cli.repo_scan import FileSampleProvider, collect_repository_paths
from condenser_cli.resolver import (
    areas_for_path,
    find_ownership_conflicts,
    find_uncategorized_paths,
    group_paths_by_area,
    is_categorized,
)

SAMPLE_PATHS = [
    "README.md",
    "docs",
    "docs/guide.md",
    "scripts",
    "scripts/deploy.sh",
    "src",
    "src/api",
    "src/api/userService.ts",
    "src/components",
    "src/components/App.test.ts",
    "src/components/App.ts",
    "src/index.ts",
    "src/utils",
    "src/utils/config.ts",
]


class TestCollectRepositoryPaths:
    """Tests for repository enumeration."""

    def test_sample_repo(self, sample_repo_path: Path):
        """Test files and directories are listed relative and sorted."""
        assert collect_repository_paths(sample_repo_path) == SAMPLE_PATHS

    def test_skips_ignored_and_hidden(self, temp_dir: Path):
        for rel in ("node_modules/pkg/index.js", ".git/HEAD", "dist/out.js", "src/.env", "src/main.py"):
            target = temp_dir / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text("x", encoding="utf-8")

        assert collect_repository_paths(temp_dir) == ["src", "src/main.py"]

    def test_empty_repo(self, temp_dir: Path):
        assert collect_repository_paths(temp_dir) == []


class TestFileSampleProvider:
    """Tests for reading classification samples."""

    def test_reads_file(self, sample_repo_path: Path):
        provider = FileSampleProvider(sample_repo_path)

        assert "UserService" in provider("src/api/userService.ts")

    def test_directory_and_missing_return_none(self, sample_repo_path: Path):
        provider = FileSampleProvider(sample_repo_path)

        assert provider("src/api") is None
        assert provider("does/not/exist.ts") is None

    def test_binary_file_returns_none(self, temp_dir: Path):
        (temp_dir / "blob.txt").write_bytes(b"\xff\xfe\x00\x81")

        assert FileSampleProvider(temp_dir)("blob.txt") is None


class TestFindUncategorizedPaths:
    """Tests for gap detection."""

    def test_sample_repo_gaps(self, sample_config: ProjectConfig):
        """Test excluded and unlisted paths are reported in input order."""
        gaps = find_uncategorized_paths(SAMPLE_PATHS, sample_config)

        assert gaps == [
            "README.md",
            "docs",
            "docs/guide.md",
            "scripts",
            "scripts/deploy.sh",
            "src",
            "src/components/App.test.ts",
        ]

    def test_no_areas_everything_uncategorized(self):
        assert find_uncategorized_paths(SAMPLE_PATHS, ProjectConfig()) == SAMPLE_PATHS

    def test_empty_input(self, sample_config: ProjectConfig):
        assert find_uncategorized_paths([], sample_config) == []

    def test_area_without_includes_owns_nothing(self):
        config = ProjectConfig(areas={"empty": AreaDefinition(excluded_patterns=["**/*.md"])})

        assert find_uncategorized_paths(["README.md", "src"], config) == ["README.md", "src"]

    def test_partition(self, sample_config: ProjectConfig):
        """Test every path is either categorized or reported, never both."""
        gaps = set(find_uncategorized_paths(SAMPLE_PATHS, sample_config))

        for path in SAMPLE_PATHS:
            assert (path in gaps) != is_categorized(path, sample_config)


class TestOwnership:
    """Tests for multi-area ownership."""

    def test_single_owner(self, sample_config: ProjectConfig):
        assert areas_for_path("src/api/userService.ts", sample_config) == ["api"]
        assert areas_for_path("src/index.ts", sample_config) == ["core"]

    def test_overlap_reports_all_owners(self):
        """Test overlapping areas are reported in declaration order, not tie-broken."""
        config = ProjectConfig(
            areas={
                "shared": AreaDefinition(included_patterns=["src/**"]),
                "api": AreaDefinition(included_patterns=["src/api"]),
            }
        )

        assert areas_for_path("src/api/users.ts", config) == ["shared", "api"]
        assert find_ownership_conflicts(["src/api/users.ts", "src/app.ts"], config) == {
            "src/api/users.ts": ["shared", "api"],
        }

    def test_no_conflicts_in_sample(self, sample_config: ProjectConfig):
        assert find_ownership_conflicts(SAMPLE_PATHS, sample_config) == {}

    def test_group_paths_by_area(self, sample_config: ProjectConfig):
        grouped = group_paths_by_area(SAMPLE_PATHS, sample_config)

        assert grouped["api"] == ["src/api", "src/api/userService.ts"]
        assert grouped["utils"] == ["src/utils", "src/utils/config.ts"]
        assert "src/components/App.test.ts" not in grouped["core"]
