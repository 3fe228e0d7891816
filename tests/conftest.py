"""
Configuration for pytest test suite
"""
import os

import pytest

# Set test environment variables BEFORE importing anything from translation_review
os.environ.update({
    "GITHUB_TOKEN": "ghp_testtoken1234567890abcdefghij",
    "GITHUB_REPOSITORY": "example-org/app",
    "PR_NUMBER": "17",
    "AZURE_OPEN_AI_SECRET": "test_azure_key",
    "AZURE_OPEN_AI_URL": "https://example.openai.azure.com",
    "AZURE_OPEN_AI_DEPLOYMENT": "gpt-4o",
})

from translation_review.config.settings import Settings  # noqa: E402


GERMAN_DIFF = """diff --git a/de.json b/de.json
index 1111111..2222222 100644
--- a/de.json
+++ b/de.json
@@ -1,4 +1,4 @@
 {
-  "starting_point": "Startpunkttt",
+  "starting_point": "Startpunkt",
   "destination": "Ziel"
 }"""

QUOTED_CHINESE_DIFF = """diff --git "a/zh-CN.json" "b/zh-CN.json"
index 3333333..4444444 100644
--- "a/zh-CN.json"
+++ "b/zh-CN.json"
@@ -1,3 +1,4 @@
 {
+  "destination": "目的地",
   "starting_point": "起点"
 }"""

APP_AND_LOCKFILE_DIFF = """diff --git a/src/App.tsx b/src/App.tsx
index 5555555..6666666 100644
--- a/src/App.tsx
+++ b/src/App.tsx
@@ -1,3 +1,3 @@
-const title = "Old";
+const title = "New";
 export default title;
diff --git a/yarn.lock b/yarn.lock
index 7777777..8888888 100644
--- a/yarn.lock
+++ b/yarn.lock
@@ -10,3 +10,3 @@
-lodash@4.17.20:
+lodash@4.17.21:
   version "4.17.21"
"""

GERMAN_FILE = """{
  "starting_point": "Startpunkt",
  "destination": "Ziel",
  "charger": {
    "zero": "Keine Ladevorgänge"
  }
}
"""

ENGLISH_FILE = """{
  "starting_point": "Starting point",
  "destination": "Destination",
  "charger": {
    "zero": "No charges",
    "one": "{{count}} charge"
  }
}
"""


@pytest.fixture
def settings():
    """Settings built from the test environment."""
    return Settings.from_env()


@pytest.fixture
def german_diff():
    return GERMAN_DIFF


@pytest.fixture
def quoted_chinese_diff():
    return QUOTED_CHINESE_DIFF


@pytest.fixture
def app_and_lockfile_diff():
    return APP_AND_LOCKFILE_DIFF


@pytest.fixture
def english_translations():
    return {
        "starting_point": "Starting point",
        "destination": "Destination",
        "charger": {"zero": "No charges", "one": "{{count}} charge"},
    }
