import sys

from setuptools import setup

sys.path.insert(0, 'sysfs_backlight')
from _version import __author__, __version__  # noqa: E402

setup(
    name='sysfs_backlight',
    version=__version__,
    license='MIT',
    author=__author__,
    packages=['sysfs_backlight'],
    install_requires=[],
    extras_require={'test': ['pytest', 'pytest-mock']},
    entry_points={
        'console_scripts': ['sysfs-backlight=sysfs_backlight.__main__:main']
    },
    description='A backlight and LED brightness tool for Linux that plays well with hybrid GPUs',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    classifiers=[
        'Development Status :: 4 - Beta',
        'License :: OSI Approved :: MIT License',
        'Operating System :: POSIX :: Linux',
        'Programming Language :: Python :: 3 :: Only',
        'Topic :: System :: Hardware'
    ],
    python_requires='>=3.8'
)
