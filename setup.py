import os

from setuptools import find_packages, setup

README = os.path.join(os.path.dirname(__file__), "README.md")


def readme() -> str:
    with open(README, encoding="utf-8") as f:
        return f.read()


setup(
    name="openapi_type_model",
    version="1.0.1",
    description="Resolve OpenAPI/Swagger schema graphs into a renderer-agnostic type model with generated examples",
    long_description=readme(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Documentation",
        "Topic :: Text Processing",
        "Intended Audience :: Developers",
    ],
    keywords="openapi swagger json schema type model documentation examples",
    author="François Lagunas",
    author_email="francois.lagunas@gmail.com",
    license="MIT",
    packages=find_packages(),
    python_requires=">=3.11",
    install_requires=[
        "click>=8.0.0",
        "jinja2>=3.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "openapi_type_model=openapi_type_model.openapi_type_model:openapi_type_model",
        ],
    },
    include_package_data=True,
    package_data={
        "openapi_type_model": ["templates/**/*.jinja2", "templates/*.jinja2"],
    },
    zip_safe=False,
)
