"""
Тесты командной строки pkmeans.
"""

import pytest
from pkmeans.main import main


@pytest.fixture
def points_file(tmp_path):
    path = tmp_path / "points.txt"
    path.write_text(
        "0 0.0 0.0\n"
        "1 1.0 0.0\n"
        "2 10.0 10.0\n"
        "3 11.0 10.0\n",
        encoding="utf-8",
    )
    return path


class TestMain:
    """Тесты полного запуска: чтение, кластеризация, запись."""

    def test_writes_results(self, points_file):
        assert main(["-i", str(points_file), "-n", "2", "-p", "2"]) == 0

        membership = points_file.with_name("points.txt.membership")
        centres = points_file.with_name("points.txt.cluster_centres")
        assert membership.read_text(encoding="utf-8").splitlines() == [
            "0 0", "1 0", "2 1", "3 1",
        ]
        assert centres.read_text(encoding="utf-8").splitlines()[1] == "1 10.500000 10.000000"

    def test_timing_report(self, points_file, capsys):
        assert main(["-i", str(points_file), "-n", "2", "-o"]) == 0

        out = capsys.readouterr().out
        assert "numObjs       = 4" in out
        assert "numCoords     = 2" in out
        assert "nloops        = 3" in out
        assert "Computation timing" in out

    def test_single_cluster_rejected(self, points_file):
        assert main(["-i", str(points_file), "-n", "1"]) == 1

    def test_missing_file(self, tmp_path):
        assert main(["-i", str(tmp_path / "none.txt"), "-n", "2"]) == 1

    def test_missing_required_args(self):
        with pytest.raises(SystemExit) as exc:
            main(["-n", "2"])
        assert exc.value.code == 2

    def test_generate_binary(self, tmp_path):
        path = tmp_path / "blobs.bin"

        assert main(["-i", str(path), "-n", "3", "-b", "--generate", "300", "2", "3"]) == 0

        lines = path.with_name("blobs.bin.membership").read_text(encoding="utf-8").splitlines()
        assert len(lines) == 300
