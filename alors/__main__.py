from alors.cli import app

app(prog_name="alors")
