# pip install -e ".[test]"
from setuptools import find_packages, setup

INSTALL_REQUIRES = [
    "numpy>=1.17",
]

EXTRAS_REQUIRE = {
    "test": ["pytest"],
}


def main() -> None:
    """Main setup function"""
    setup(
        name="rtreap",
        version="0.1.0",
        description="Randomized treap with split-based insertion",
        python_requires=">=3.9",
        packages=find_packages(include=["rtreap", "rtreap.*"]),
        install_requires=INSTALL_REQUIRES,
        extras_require=EXTRAS_REQUIRE,
        entry_points={
            "console_scripts": ["rtreap=rtreap.driver:main"],
        },
        zip_safe=False
    )


if __name__ == "__main__":
    main()
