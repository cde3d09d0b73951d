"""Common constants shared across slpg modules."""

from pathlib import Path

OUTPUT_DIR = Path("output")
POLICY_OUTPUT_PATH = OUTPUT_DIR / "generated-policy.json"
CONTEXT_OUTPUT_PATH = OUTPUT_DIR / "detected-context.json"
