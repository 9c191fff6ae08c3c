# Services package.
#
# board_service exposes ArticleBoard, which encapsulates every Redis
# command issued on behalf of the article board:
#
#   submit_article / vote / assign_category   — writes
#   list_latest / list_most_upvoted / list_all
#   list_by_category / get_article / stats    — reads
#
# A single ArticleBoard is built at startup around the shared Redis
# client and handed to routers through the ``get_board`` dependency.
