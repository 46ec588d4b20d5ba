from typed_notes.app import main

main()
