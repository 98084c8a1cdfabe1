from rewardrecon.ui.cli import run

run()
