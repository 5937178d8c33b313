from twig.cli import app

app(prog_name="twig")
