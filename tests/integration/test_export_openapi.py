import importlib.util
import json
from pathlib import Path

import yaml

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "export_openapi.py"


def load_script():
    spec = importlib.util.spec_from_file_location("export_openapi", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_default_output_is_repo_root():
    module = load_script()

    assert module.DEFAULT_OUTPUT == SCRIPT.parent.parent / "openapi.yaml"


def test_writes_yaml_document(tmp_path):
    module = load_script()
    output = tmp_path / "openapi.yaml"

    assert module.main(["--output", str(output)]) == output

    document = yaml.safe_load(output.read_text(encoding="utf-8"))
    assert "/agent/present" in document["paths"]
    assert "/sessions" not in document["paths"]


def test_json_suffix_switches_format(tmp_path):
    module = load_script()
    output = tmp_path / "openapi.json"

    module.main(["--output", str(output)])

    document = json.loads(output.read_text(encoding="utf-8"))
    assert "/avatar/session" in document["paths"]
