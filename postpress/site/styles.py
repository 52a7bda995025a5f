"""Inline CSS used by the static site generator."""

CSS = r"""
:root {
  --bg: #fdfdfc;
  --fg: #1d1d1f;
  --muted: #6b6b70;
  --border: #e4e4e7;
  --link: #2f5fd0;
  --code-bg: #f4f4f5;
  --body: Charter, "Iowan Old Style", Georgia, serif;
  --ui: system-ui, -apple-system, "Segoe UI", sans-serif;
  --mono: ui-monospace, "SF Mono", "Consolas", "Liberation Mono", monospace;
  --page-max: 760px;
}

body {
  font-family: var(--body);
  font-size: 18px;
  line-height: 1.65;
  max-width: var(--page-max);
  margin: 0 auto;
  padding: 2rem 1.25rem 4rem;
  background: var(--bg);
  color: var(--fg);
}

a { color: var(--link); text-decoration: none; }
a:hover { text-decoration: underline; text-underline-offset: 0.15em; }

header {
  display: flex;
  justify-content: space-between;
  align-items: baseline;
  font-family: var(--ui);
  font-size: 14px;
  border-bottom: 1px solid var(--border);
  padding-bottom: 0.75rem;
  margin-bottom: 2rem;
  gap: 0.5rem 1rem;
  flex-wrap: wrap;
}

nav a { margin-left: 1rem; color: var(--muted); }

h1, h2, h3, h4 { font-family: var(--ui); line-height: 1.3; margin: 1.75rem 0 0.75rem; }
h1 { font-size: 30px; margin-top: 0; }
h2 { font-size: 22px; }
h3 { font-size: 18px; }

.muted { color: var(--muted); font-family: var(--ui); font-size: 14px; }
.tags a { margin-right: 0.6rem; }
.rule { border-top: 1px solid var(--border); margin: 1.5rem 0; }
.series { border: 1px solid var(--border); padding: 0.75rem 1rem; margin: 1.25rem 0; }
.series .current { font-weight: 600; }
.pager { display: flex; justify-content: space-between; gap: 1rem; font-family: var(--ui); font-size: 15px; }

ul.posts { list-style: none; padding-left: 0; }
ul.posts li { margin: 1.25rem 0; }
ul.posts .title { font-family: var(--ui); font-size: 19px; font-weight: 600; }

ul { margin: 0.75rem 0; padding-left: 1.5rem; }
ol { margin: 0.75rem 0; padding-left: 1.75rem; }
li { margin: 0.3rem 0; }

img { max-width: 100%; height: auto; }

table { border-collapse: collapse; width: 100%; margin: 1rem 0; font-size: 16px; }
th, td { border: 1px solid var(--border); padding: 0.35rem 0.6rem; vertical-align: top; }
th { text-align: left; background: var(--code-bg); }

pre {
  overflow-x: auto;
  margin: 1rem 0;
  padding: 0.75rem 1rem;
  background: var(--code-bg);
  border: 1px solid var(--border);
  font-size: 14px;
  line-height: 1.5;
}

code { font-family: var(--mono); font-size: 0.88em; }
p code, li code, td code { background: var(--code-bg); padding: 0.1rem 0.3rem; }

blockquote {
  margin: 1rem 0;
  padding: 0 1rem;
  border-left: 3px solid var(--border);
  color: var(--muted);
}

hr { border: none; border-top: 1px solid var(--border); margin: 2rem 0; }

@media print {
  body { background: #fff; color: #000; max-width: none; padding: 1rem; }
  header, .pager { display: none; }
}

@media (max-width: 640px) {
  body { font-size: 17px; padding: 1.25rem 1rem 3rem; }
  nav a { margin-left: 0; margin-right: 1rem; }
}
"""
