from ao_mcp.server import main

main()
