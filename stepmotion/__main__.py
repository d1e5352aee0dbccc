from stepmotion.cli.sample import main_entry

main_entry()
