# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="subjectfolders",
    version="1.0.0",
    description="Provision, verify and archive a shared subject-folder hierarchy from a CSV specification",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["subjectfolders", "subjectfolders.*"]),
    python_requires=">=3.9",
    install_requires=[
        "customtkinter",  # Project name prompt opened by the subject-folder launcher
        "requests",  # Webhook delivery of the end-of-run warning
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'subjectfolders=subjectfolders.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
