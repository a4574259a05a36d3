from pathlib import Path
from setuptools import find_packages, setup


def read_requirements() -> list[str]:
    req_path = Path(__file__).parent / "requirements.txt"
    if not req_path.exists():
        return []
    return [line.strip() for line in req_path.read_text(encoding="utf-8").splitlines() if line.strip() and not line.startswith("#")]


setup(
    name="axiom-governance",
    version="0.1.0",
    description="Policy evaluation and FDCPA/FCRA/ECOA compliance validation for banking AI agents",
    packages=find_packages(include=["axiom_governance", "axiom_governance.*"]),
    py_modules=["governance_pipeline"],
    install_requires=read_requirements(),
    extras_require={"test": ["pytest>=7.0"]},
    python_requires=">=3.10",
    include_package_data=True,
    entry_points={
        "console_scripts": [
            "axiom-evaluate=axiom_governance.scripts.evaluate_policy:main",
            "axiom-pipeline=governance_pipeline:main",
        ]
    },
)
