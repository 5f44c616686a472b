from mcp_server_blinko.server import main

main()
