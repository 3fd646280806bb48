import setuptools
import os

own_dir = os.path.abspath(os.path.dirname(__file__))


def _requirements(fname):
    with open(os.path.join(own_dir, fname)) as f:
        for line in f.readlines():
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            yield line


def modules():
    return [
        'buildmetadata',
        'dockerutil',
        'gitutil',
        'http_requests',
        'optionutil',
    ]


def version():
    with open(os.path.join(own_dir, 'VERSION')) as f:
        return f.read().strip()


setuptools.setup(
    name='pipeline-helpers',
    version=version(),
    description='CI pipeline helpers for build metadata, Artifactory and Docker images',
    python_requires='>=3.10',
    py_modules=modules(),
    packages=['artifactoryutil', 'ci', 'cli', 'model'],
    install_requires=list(_requirements('requirements.txt')),
    extras_require={
        'test': list(_requirements('requirements.test.txt')),
    },
    entry_points={
        'console_scripts': [
            'pipeline-cli = cli.cli_gen:main',
        ],
    },
)
