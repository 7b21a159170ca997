"""
툴 패키지 초기화 모듈.

- 이 파일은 MCP 서버가 로딩할 "사용 가능한 툴 모듈"들을 한 곳에서 모아 노출합니다.
- `ALL` 리스트에 포함된 모듈들은 `core.AppServer` 가 시작할 때 등록합니다.
- 각 모듈은 `tool_spec`(메타데이터)와 `create_handler(services)`(핸들러 생성 함수)를 export 합니다.
- 새 툴을 추가하려면 같은 디렉터리에 모듈 파일을 만들고, 아래 ALL에 import + 추가하세요.
"""

from . import echo, weather

# 서버가 로드할 툴 모듈 목록 (등록 순서가 tools/list 노출 순서가 됩니다)
ALL = [echo, weather]
