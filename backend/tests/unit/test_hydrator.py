"""
模板填充单元测试
"""

import json
from pathlib import Path

import pytest

from mdpress.interfaces import ConfigError
from mdpress.pipeline import TemplateHydrator


def _write_data(path: Path, data) -> Path:
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path


class TestTemplateHydrator:
    """模板填充测试"""

    def test_hydrate_html_wrapped(self, temp_dir: Path, png_bytes: bytes, fake_renderer, make_executor):
        """测试简单HTML模板套外壳，数据值转义，标题取 Title"""
        (temp_dir / "logo.png").write_bytes(png_bytes)
        template = temp_dir / "exam.html"
        template.write_text('<h1>{{ Name }}</h1><img src="logo.png">', encoding="utf-8")
        data = _write_data(temp_dir / "exams.json", {
            "b": {"Name": "Bob <x>", "Title": "Exam B"},
            "a": {"Name": "Al"},
        })

        hydrator = TemplateHydrator(executor=make_executor(fake_renderer))
        report = hydrator.hydrate(template, data, temp_dir / "out")

        assert report.ok
        assert [a.path.name for a in report.artifacts] == ["a.pdf", "b.pdf"]

        html_b = fake_renderer.html_for("b.pdf")
        assert "<title>Exam B</title>" in html_b
        assert "<h1>Bob &lt;x&gt;</h1>" in html_b
        assert 'src="data:image/png;base64,' in html_b
        assert "<title>a</title>" in fake_renderer.html_for("a.pdf")

    def test_hydrate_styled_not_wrapped(self, temp_dir: Path, fake_renderer, make_executor):
        """测试自带样式模板直接使用"""
        template = temp_dir / "styled.html"
        template.write_text("<style>h1 { color: red; }</style><h1>{{ Name }}</h1>", encoding="utf-8")
        data = _write_data(temp_dir / "d.json", {"one": {"Name": "N"}})

        TemplateHydrator(executor=make_executor(fake_renderer)).hydrate(template, data, temp_dir / "out")
        assert fake_renderer.html_for("one.pdf") == "<style>h1 { color: red; }</style><h1>N</h1>"

    def test_hydrate_markdown(self, temp_dir: Path, fake_renderer, make_executor):
        """测试 Markdown 模板"""
        template = temp_dir / "card.md"
        template.write_text("# {{ Name }}\n\n{{ data.Score }} points\n", encoding="utf-8")
        data = _write_data(temp_dir / "d.json", {"card": {"Name": "Zed", "Score": 9}})

        TemplateHydrator(executor=make_executor(fake_renderer)).hydrate(template, data, temp_dir / "out")
        html = fake_renderer.html_for("card.pdf")
        assert "Zed</h1>" in html
        assert "<p>9 points</p>" in html

    def test_images_dir(self, temp_dir: Path, png_bytes: bytes, fake_renderer, make_executor):
        """测试图片基准目录可单独指定"""
        images = temp_dir / "images"
        images.mkdir()
        (images / "pic.png").write_bytes(png_bytes)
        template = temp_dir / "t.html"
        template.write_text('<img src="pic.png">', encoding="utf-8")
        data = _write_data(temp_dir / "d.json", {"x": {}})

        TemplateHydrator(executor=make_executor(fake_renderer)).hydrate(
            template, data, temp_dir / "out", images_dir=images
        )
        assert "data:image/png;base64," in fake_renderer.html_for("x.pdf")

    def test_entry_failure_isolated(self, temp_dir: Path, failing_renderer, make_executor):
        """测试单个条目失败不影响其他条目"""
        template = temp_dir / "t.html"
        template.write_text("<p>{{ Name }}</p>", encoding="utf-8")
        data = _write_data(temp_dir / "d.json", {"a": {"Name": "A"}, "b": {"Name": "B"}})

        report = TemplateHydrator(executor=make_executor(failing_renderer("a.pdf"))).hydrate(
            template, data, temp_dir / "out"
        )
        assert not report.ok
        assert list(report.failures) == ["a"]
        assert [a.path.name for a in report.artifacts] == ["b.pdf"]

    def test_expression_error_isolated(self, temp_dir: Path, fake_renderer, make_executor):
        """测试模板表达式运行期错误只影响当前条目"""
        template = temp_dir / "t.html"
        template.write_text("<p>{{ Score + 1 }}</p>", encoding="utf-8")
        data = _write_data(temp_dir / "d.json", {"a": {"Score": "x"}, "b": {"Score": 2}})

        report = TemplateHydrator(executor=make_executor(fake_renderer)).hydrate(
            template, data, temp_dir / "out"
        )
        assert list(report.failures) == ["a"]
        assert [a.path.name for a in report.artifacts] == ["b.pdf"]
        assert "<p>3</p>" in fake_renderer.html_for("b.pdf")

    def test_bad_data_file(self, temp_dir: Path, fake_renderer, make_executor):
        """测试数据文件错误"""
        template = temp_dir / "t.html"
        template.write_text("<p>x</p>", encoding="utf-8")
        hydrator = TemplateHydrator(executor=make_executor(fake_renderer))

        not_object = _write_data(temp_dir / "list.json", [1, 2])
        with pytest.raises(ConfigError):
            hydrator.hydrate(template, not_object, temp_dir / "out")

        broken = temp_dir / "broken.json"
        broken.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            hydrator.hydrate(template, broken, temp_dir / "out")

    def test_bad_template(self, temp_dir: Path, fake_renderer, make_executor):
        """测试模板语法错误"""
        template = temp_dir / "t.html"
        template.write_text("<p>{% if %}</p>", encoding="utf-8")
        data = _write_data(temp_dir / "d.json", {"a": {}})
        with pytest.raises(ConfigError):
            TemplateHydrator(executor=make_executor(fake_renderer)).hydrate(
                template, data, temp_dir / "out"
            )
