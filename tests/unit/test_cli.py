"""Unit tests for the landscaper CLI."""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner, Result
from conftest import make_png

from landscaper.cli import cli
from landscaper.cli.handlers import map_exception_to_exit
from landscaper.cli.utils import (
    EXIT_API_OR_NETWORK,
    EXIT_VALIDATION_OR_CONFIG,
    parse_replacement,
)
from landscaper.core.models import (
    DesignCatalog,
    Density,
    GeneratedResult,
    ImageData,
    PlantEntry,
    Replacement,
)
from landscaper.utils.exceptions import (
    ConfigurationError,
    DesignServiceError,
    ErrorKind,
    Failure,
    ImageProcessingError,
    NetworkError,
    ValidationError,
)

RESULT_IMAGE = ImageData(data=make_png((0, 128, 0)))


def _run_cli(*args: str) -> Result:
    runner = CliRunner()
    return runner.invoke(cli, list(args))


def _fake_client_cls() -> MagicMock:
    client = MagicMock()
    client.config.image_model = "image-model"
    client.config.text_model = "text-model"
    client.config.element_image_model = "element-model"
    return MagicMock(return_value=client)


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    path = tmp_path / "yard.png"
    path.write_bytes(make_png())
    return path


@pytest.mark.unit
class TestRedesignCommand:
    @patch("landscaper.cli.commands.redesign_outdoor_space")
    @patch("landscaper.cli.commands.GeminiClient", new_callable=_fake_client_cls)
    @patch("landscaper.cli.commands.Config")
    def test_writes_image_and_catalog(
        self,
        _mock_config_cls: MagicMock,
        _mock_client_cls: MagicMock,
        mock_redesign: MagicMock,
        source_file: Path,
        tmp_path: Path,
    ) -> None:
        catalog = DesignCatalog(plants=[PlantEntry("Lavender", "Lavandula")])
        mock_redesign.return_value = GeneratedResult(
            image=RESULT_IMAGE, catalog=catalog, catalog_found=True
        )
        out_file = tmp_path / "out.png"
        catalog_file = tmp_path / "catalog.json"

        result = _run_cli(
            "redesign",
            str(source_file),
            "-s",
            "tropical",
            "-s",
            "modern",
            "--structural",
            "-c",
            "Desert Southwest",
            "--density",
            "lush",
            "-o",
            str(out_file),
            "--catalog-out",
            str(catalog_file),
        )

        assert result.exit_code == 0, result.output
        assert out_file.read_bytes() == RESULT_IMAGE.data
        assert json.loads(catalog_file.read_text())["plants"] == [
            {"name": "Lavender", "species": "Lavandula"}
        ]
        assert str(out_file) in result.output
        _, design, source = mock_redesign.call_args.args
        assert design.styles == ("tropical", "modern")
        assert design.allow_structural_changes is True
        assert design.climate_zone == "Desert Southwest"
        assert design.density == Density.LUSH
        assert source.data == source_file.read_bytes()

    @patch("landscaper.cli.commands.redesign_outdoor_space")
    @patch("landscaper.cli.commands.GeminiClient", new_callable=_fake_client_cls)
    @patch("landscaper.cli.commands.Config")
    def test_failure_exits_with_api_code(
        self,
        _mock_config_cls: MagicMock,
        _mock_client_cls: MagicMock,
        mock_redesign: MagicMock,
        source_file: Path,
    ) -> None:
        mock_redesign.return_value = Failure(
            kind=ErrorKind.NO_IMAGE_RETURNED,
            message="The model did not return a redesigned image.",
        )
        result = _run_cli("redesign", str(source_file), "-s", "modern", "--quiet")
        assert result.exit_code == EXIT_API_OR_NETWORK
        assert "Gemini API error: The model did not return a redesigned image." in result.output

    def test_style_required(self, source_file: Path) -> None:
        result = _run_cli("redesign", str(source_file))
        assert result.exit_code != 0
        assert "style" in result.output.lower()

    @patch("landscaper.cli.commands.Config")
    def test_configuration_error_exit_code(
        self, mock_config_cls: MagicMock, source_file: Path
    ) -> None:
        mock_config_cls.from_env.return_value.validate.side_effect = ConfigurationError(
            "Gemini API key is required."
        )
        result = _run_cli("redesign", str(source_file), "-s", "modern", "--quiet")
        assert result.exit_code == EXIT_VALIDATION_OR_CONFIG
        assert "API key" in result.output


@pytest.mark.unit
class TestRefineCommand:
    @patch("landscaper.cli.commands.refine_redesign")
    @patch("landscaper.cli.commands.GeminiClient", new_callable=_fake_client_cls)
    @patch("landscaper.cli.commands.Config")
    def test_modifications_passed(
        self,
        _mock_config_cls: MagicMock,
        _mock_client_cls: MagicMock,
        mock_refine: MagicMock,
        source_file: Path,
        tmp_path: Path,
    ) -> None:
        mock_refine.return_value = RESULT_IMAGE
        out_file = tmp_path / "refined.png"
        result = _run_cli(
            "refine",
            str(source_file),
            "--delete",
            "shed",
            "--replace",
            "lawn=clover",
            "--add",
            "bench",
            "-o",
            str(out_file),
        )
        assert result.exit_code == 0, result.output
        assert out_file.read_bytes() == RESULT_IMAGE.data
        modifications = mock_refine.call_args.args[2]
        assert modifications.deletions == ["shed"]
        assert modifications.replacements == [Replacement("lawn", "clover")]
        assert modifications.additions == ["bench"]

    def test_bad_replace_value(self, source_file: Path) -> None:
        result = _run_cli("refine", str(source_file), "--replace", "lawn")
        assert result.exit_code == 2
        assert "FROM=TO" in result.output


@pytest.mark.unit
class TestElementCommands:
    @patch("landscaper.cli.commands.get_replacement_suggestions")
    @patch("landscaper.cli.commands.GeminiClient", new_callable=_fake_client_cls)
    @patch("landscaper.cli.commands.Config")
    def test_suggest_prints_one_per_line(
        self, _mock_config_cls: MagicMock, _mock_client_cls: MagicMock, mock_suggest: MagicMock
    ) -> None:
        mock_suggest.return_value = ["Japanese Maple", "Birch"]
        result = _run_cli("suggest", "Oak Tree", "-s", "japanese-zen", "--quiet")
        assert result.exit_code == 0
        assert result.output.splitlines()[-2:] == ["Japanese Maple", "Birch"]
        assert mock_suggest.call_args.args[1:] == ("Oak Tree", ("japanese-zen",), "")

    @patch("landscaper.cli.commands.get_element_info")
    @patch("landscaper.cli.commands.GeminiClient", new_callable=_fake_client_cls)
    @patch("landscaper.cli.commands.Config")
    def test_info_prints_text(
        self, _mock_config_cls: MagicMock, _mock_client_cls: MagicMock, mock_info: MagicMock
    ) -> None:
        mock_info.return_value = "A hardy evergreen shrub."
        result = _run_cli("info", "Boxwood", "--quiet")
        assert result.exit_code == 0
        assert "A hardy evergreen shrub." in result.output

    @patch("landscaper.cli.commands.get_element_image")
    @patch("landscaper.cli.commands.GeminiClient", new_callable=_fake_client_cls)
    @patch("landscaper.cli.commands.Config")
    def test_element_image_written(
        self,
        _mock_config_cls: MagicMock,
        _mock_client_cls: MagicMock,
        mock_image: MagicMock,
        tmp_path: Path,
    ) -> None:
        mock_image.return_value = RESULT_IMAGE
        out_file = tmp_path / "bench.png"
        result = _run_cli("element-image", "Bench", "-o", str(out_file), "--quiet")
        assert result.exit_code == 0
        assert out_file.read_bytes() == RESULT_IMAGE.data

    def test_styles_lists_catalog(self) -> None:
        result = _run_cli("styles")
        assert result.exit_code == 0
        assert "japanese-zen\tJapanese Zen" in result.output


@pytest.mark.unit
class TestErrorMapping:
    def test_validation_error_includes_field(self):
        code, msg = map_exception_to_exit(ValidationError("bad", field="styles"))
        assert code == EXIT_VALIDATION_OR_CONFIG
        assert msg == "bad (field: styles)"

    def test_image_and_file_errors_are_input_errors(self):
        assert map_exception_to_exit(ImageProcessingError("x"))[0] == EXIT_VALIDATION_OR_CONFIG
        assert map_exception_to_exit(FileNotFoundError("x"))[0] == EXIT_VALIDATION_OR_CONFIG

    def test_service_errors_are_api_errors(self):
        assert map_exception_to_exit(DesignServiceError("x"))[0] == EXIT_API_OR_NETWORK
        assert map_exception_to_exit(NetworkError("x"))[0] == EXIT_API_OR_NETWORK


@pytest.mark.unit
class TestParseReplacement:
    def test_splits_on_first_equals(self):
        assert parse_replacement(" lawn = clover=lush ") == Replacement("lawn", "clover=lush")

    def test_missing_target(self):
        import click

        with pytest.raises(click.BadParameter):
            parse_replacement("lawn=")
