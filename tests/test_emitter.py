import re
from lesswire.less import Parser, compile_less
from lesswire.less.emitter import Emitter, CssRule, CssAtBlock, CssDeclaration, CssComment, CssDirective
from lesswire.less.values import Keyword, Color

SAMPLE = ('.a > .b, .c + .d { color: red; margin: 0 auto !important; }\n'
          '@media screen and (max-width: 100px) { .a { color: blue; } }\n'
          '@font-face { font-family: "X"; src: url(x.woff); }')


def test_compressed_output():
    css = compile_less('.a > .b, .c + .d { color: #ffffff; margin: 0.5em 0 !important; }', compress=True)
    assert css == '.a>.b,.c+.d{color:#fff;margin:.5em 0!important}'


def test_compressed_at_rules():
    css = compile_less(SAMPLE, compress=True)
    assert css == ('.a>.b,.c+.d{color:red;margin:0 auto!important}'
                   '@media screen and (max-width:100px){.a{color:blue}}'
                   '@font-face{font-family:"X";src:url(x.woff)}')


def test_compressed_matches_normal_without_whitespace():
    normal = compile_less(SAMPLE)
    compressed = compile_less(SAMPLE, compress=True)
    assert re.sub(r'\s+', '', normal).replace(';}', '}') == re.sub(r'\s+', '', compressed)


def test_compress_drops_comments():
    assert compile_less('/* a */\n.a { /* b */ color: red; }', compress=True) == '.a{color:red}'


def test_plain_css_is_unchanged(resources):
    css = Parser().parse_file(resources.path('styles', 'flat.css')).get_css()
    assert css == resources.read('styles', 'flat.css')


def test_charset_and_imports_first():
    css = compile_less('.a { x: y; }\n@import url("foo.css");\n@charset "utf-8";\n@charset "latin1";')
    assert css == '@charset "utf-8";\n@import url("foo.css");\n.a {\n  x: y;\n}\n'


def test_empty_rules_are_skipped():
    assert compile_less('.a { }\n.b { .c { } }\n@media print { .d { } }') == ''


def test_emitter_nodes():
    nodes = [
        CssComment('/* x */'),
        CssRule(['.a'], [CssDeclaration('color', Color.from_hex('#aabbcc'), False)]),
        CssAtBlock('@supports', '(display: grid)', [
            CssRule(['.b'], [CssDeclaration('display', Keyword('grid'), True)])]),
        CssDirective('@namespace svg url(http://www.w3.org/2000/svg)'),
    ]
    assert Emitter().emit(nodes) == ('/* x */\n'
                                     '.a {\n  color: #aabbcc;\n}\n'
                                     '@supports (display: grid) {\n  .b {\n    display: grid !important;\n  }\n}\n'
                                     '@namespace svg url(http://www.w3.org/2000/svg);\n')
    assert Emitter(compress=True).emit(nodes) == ('.a{color:#abc}'
                                                  '@supports (display:grid){.b{display:grid!important}}'
                                                  '@namespace svg url(http://www.w3.org/2000/svg);')


def test_compressed_selectors_keep_strings():
    assert compile_less('a[title="a > b"] { x: y; }', compress=True) == 'a[title="a > b"]{x:y}'
    assert compile_less('a:not(.b, .c) > d { x: y; }', compress=True) == 'a:not(.b,.c)>d{x:y}'


def test_compressed_prelude_keeps_strings():
    css = compile_less('@supports (content: "a, b") { .a { x: y; } }', compress=True)
    assert css == '@supports (content:"a, b"){.a{x:y}}'


def test_compressed_declarations_before_nested_blocks():
    text = '@page { margin: 1cm; @top-left { content: "x"; } }'
    assert compile_less(text, compress=True) == '@page{margin:1cm;@top-left{content:"x"}}'
    assert compile_less(text) == '@page {\n  margin: 1cm;\n  @top-left {\n    content: "x";\n  }\n}\n'
