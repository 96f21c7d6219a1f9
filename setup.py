from setuptools import setup, find_packages

setup(
    name='ketplan',
    version='0.1.0',
    packages=find_packages(),
    include_package_data=True,
    install_requires=[
        'typer',
        'pydantic>=2.5',
        'pyyaml>=5.3.1',
        'python-dotenv',
        'tenacity>=7.0.0',
    ],
    extras_require={
        'dev': [
            'pytest>=6.2.2',
            'jsonschema',
        ],
    },
    entry_points={
        'console_scripts': [
            'ketplan=ketplan.cli:app'
        ]
    },
    description='Cluster plan file engine: versioned schema, defaults and annotated YAML',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.8',
)
