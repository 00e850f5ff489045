import json

import pytest

from mandopop.compiler import (
    COMMON_WORDS,
    compile_lexicon,
    entry_keys,
    main,
    parse_line,
    rank_entries,
    rank_key,
)
from mandopop.dictionary import MAX_ENTRIES_PER_KEY, DictionaryIndex, LexiconEntry


class TestParseLine:
    def test_valid_line(self):
        entry = parse_line("銀行 银行 [yin2 hang2] /bank/CL:家[jia1],個|个[ge4]/")
        assert entry == LexiconEntry("银行", "yín háng", ("bank", "CL:家[jia1],個|个[ge4]"))

    def test_uses_simplified_field(self):
        entry = parse_line("貓 猫 [mao1] /cat/")
        assert entry.characters == "猫"

    def test_trailing_whitespace_and_crlf(self):
        entry = parse_line("大 大 [da4] /big/large/  \r\n")
        assert entry.definitions == ("big", "large")

    def test_empty_definitions_dropped(self):
        entry = parse_line("大 大 [da4] /big//large/")
        assert entry.definitions == ("big", "large")

    @pytest.mark.parametrize("line", [
        "# CC-CEDICT",
        "#! date=2024-01-01",
        "",
        "   ",
        "no brackets here /def/",
        "大 大 [da4] no slashes",
        "大 [da4] /big/",
    ])
    def test_skipped_lines(self, line):
        assert parse_line(line) is None


class TestEntryKeys:
    def test_words_and_phrases(self):
        entry = LexiconEntry("冰淇淋", "bīng qí lín", ("ice cream",))
        assert entry_keys(entry) == ["ice", "cream", "ice cream"]

    def test_all_definitions(self):
        entry = LexiconEntry("跑", "pǎo", ("to run", "to escape"))
        assert entry_keys(entry) == ["run", "escape"]


class TestRanking:
    def test_common_word_first_regardless_of_gloss_length(self):
        rare = LexiconEntry("堤岸", "dī àn", ("bank",))
        common = LexiconEntry("银行", "yín háng", ("bank", "a very long description of the institution"))
        assert "银行" in COMMON_WORDS
        assert rank_entries([rare, common]) == [common, rare]

    def test_two_characters_then_one_then_longer(self):
        one = LexiconEntry("岸", "àn", ("bank",))
        two = LexiconEntry("河岸", "hé àn", ("bank of a river, with longer gloss",))
        three = LexiconEntry("河岸边", "hé àn biān", ("bank",))
        assert rank_entries([three, one, two]) == [two, one, three]

    def test_shorter_glosses_first(self):
        long = LexiconEntry("河岸", "hé àn", ("riverside", "bank of a river"))
        short = LexiconEntry("堤岸", "dī àn", ("bank",))
        assert rank_entries([long, short]) == [short, long]

    def test_ties_keep_insertion_order(self):
        first = LexiconEntry("甲乙", "jiǎ yǐ", ("abc",))
        second = LexiconEntry("丙丁", "bǐng dīng", ("xyz",))
        assert rank_key(first) == rank_key(second)
        assert rank_entries([first, second]) == [first, second]
        assert rank_entries([second, first]) == [second, first]

    def test_truncates(self):
        entries = [LexiconEntry(f"字{i}", "zì", ("word",)) for i in range(15)]
        ranked = rank_entries(entries)
        assert len(ranked) == MAX_ENTRIES_PER_KEY
        assert ranked == entries[:MAX_ENTRIES_PER_KEY]


class TestCompileLexicon:
    def test_statistics(self, sample_lines):
        result = compile_lexicon(sample_lines)
        assert result.entries == 9
        assert result.skipped == 1
        assert result.phrase_keys == 1
        assert result.keys == len(result.index)

    def test_bank_ranking(self, sample_index):
        characters = [e.characters for e in sample_index.get("bank")]
        assert characters == ["银行", "河岸", "岸"]

    def test_phrase_key(self, sample_index):
        entries = sample_index.get("ice cream")
        assert [e.characters for e in entries] == ["冰淇淋"]
        assert entries[0].pronunciation == "bīng qí lín"

    def test_stop_words_not_indexed(self, sample_index):
        for word in ("to", "of", "a", "the"):
            assert sample_index.get(word) is None

    def test_duplicate_entries_keep_first_definitions(self):
        lines = [
            "貓 猫 [mao1] /cat/",
            "貓 猫 [mao1] /cat/feline/",
            "猫 猫 [mao2] /cat (dialect)/",
        ]
        entries = compile_lexicon(lines).index.get("cat")
        assert [e.identity for e in entries] == [("猫", "māo"), ("猫", "máo")]
        assert entries[0].definitions == ("cat",)

    def test_one_entry_per_key_per_identity(self):
        index = compile_lexicon(["小貓 小猫 [xiao3 mao1] /kitten/little cat/cat/"]).index
        assert len(index.get("cat")) == 1

    def test_lists_capped(self):
        lines = [f"字{i} 字{i} [zi4] /word/" for i in range(25)]
        assert len(compile_lexicon(lines).index.get("word")) == MAX_ENTRIES_PER_KEY

    def test_empty_input(self):
        result = compile_lexicon([])
        assert len(result.index) == 0
        assert result.entries == 0


class TestMain:
    def test_builds_json_and_trie(self, tmp_path, sample_lines):
        lexicon = tmp_path / "cedict_ts.u8"
        lexicon.write_text("\n".join(sample_lines), encoding="utf-8")
        output = tmp_path / "out" / "cedict.json"
        trie = tmp_path / "out" / "cedict.dic"

        main(["--lexicon", str(lexicon), "--output", str(output), "--trie", str(trie)])

        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["cat"] == [{"s": "猫", "p": "māo", "d": ["cat", "CL:隻|只[zhi1]"]}]
        assert DictionaryIndex.load(trie).get("cat") == DictionaryIndex.load_json(output).get("cat")

    def test_no_trie(self, tmp_path, sample_lines):
        lexicon = tmp_path / "cedict_ts.u8"
        lexicon.write_text("\n".join(sample_lines), encoding="utf-8")
        trie = tmp_path / "cedict.dic"

        main(["-l", str(lexicon), "-o", str(tmp_path / "cedict.json"), "-t", str(trie), "--no-trie"])

        assert not trie.exists()

    def test_missing_lexicon_exits(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(["--lexicon", str(tmp_path / "missing.u8")])
        assert exc.value.code == 1
