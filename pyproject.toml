[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "yarr"
version = "2.3"
description = "HTML sanitizing, readable-content extraction and feed data helpers for a news reader"
requires-python = ">=3.10"
keywords = ["rss", "feed", "readability", "sanitizer", "html", "xml", "news"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content :: News/Diary",
    "Topic :: Text Processing :: Markup :: HTML",
    "Topic :: Text Processing :: Markup :: XML",
]
dependencies = [
    "lxml",
    "html5lib",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
yarr-reader = "yarr.content.reader:main"

[tool.hatch.build.targets.wheel]
packages = ["yarr"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
