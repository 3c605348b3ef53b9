from setuptools import setup, find_packages

setup(
    name="allnba_share",
    version="1.0.0",
    description="Two-stage model of All-NBA voting share from player game logs",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "allnba_share.data": ["name_aliases.json"],
    },
    python_requires=">=3.8",
    install_requires=[
        "pandas",
        "numpy",
        "scikit-learn",
        "joblib",
        "matplotlib",
        "seaborn",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'allnba-share=allnba_share.scripts.main:main',
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
    ],
)
