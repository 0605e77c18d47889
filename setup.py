from glob import glob
from setuptools import setup


setup(
    name='decimath',
    use_scm_version={
        'fallback_version': '0.1.0',
    },
    description='Arbitrary precision decimal expression engine',
    install_requires=[
        'regex',
        'prompt_toolkit',
    ],
    packages=['decimath'],
    package_dir={'': 'src'},
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        "Programming Language :: Python :: 3",
    ],
    python_requires='>=3.8',
    setup_requires=[
        'setuptools_scm',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-cov',
            'coverage',
            'flake8',
            'bandit',
            'mypy',
            'safety',
        ],
    },
    scripts=glob('bin/*'),
    license='ISC',
)
