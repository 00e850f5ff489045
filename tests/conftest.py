import pytest

from mandopop.compiler import build_index
from mandopop.dictionary import DictionaryIndex, LexiconEntry

SAMPLE_LEXICON = """\
# CC-CEDICT
# Sample for tests
#! version=1
貓 猫 [mao1] /cat/CL:隻|只[zhi1]/
銀行 银行 [yin2 hang2] /bank/CL:家[jia1],個|个[ge4]/
岸 岸 [an4] /bank (of a river)/shore/
河岸 河岸 [he2 an4] /riverside/bank of a river/
跑 跑 [pao3] /to run/to escape/
冰淇淋 冰淇淋 [bing1 qi2 lin2] /ice cream/
大 大 [da4] /big/large/
你好 你好 [ni3 hao3] /hello/hi/
女 女 [nv3] /female/woman/
this line is noise

"""


@pytest.fixture(autouse=True)
def isolated_cache(tmp_path, monkeypatch):
    """Keep settings and the index cache out of the real home directory."""
    cache_dir = tmp_path / "cache"
    monkeypatch.setenv("MANDOPOP_CACHE_DIR", str(cache_dir))
    monkeypatch.delenv("MANDOPOP_SETTINGS_PATH", raising=False)
    monkeypatch.delenv("MANDOPOP_INDEX_PATH", raising=False)
    return cache_dir


@pytest.fixture
def sample_lines():
    return SAMPLE_LEXICON.splitlines()


@pytest.fixture
def sample_index(sample_lines):
    return build_index(sample_lines)


@pytest.fixture
def cat_index():
    return DictionaryIndex.from_mapping({
        "cat": [LexiconEntry("猫", "māo", ("cat",))],
    })


@pytest.fixture
def index_json(tmp_path, sample_index):
    path = tmp_path / "cedict.json"
    sample_index.save_json(path)
    return path
