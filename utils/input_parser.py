"""
입력 데이터 파서 및 프로세스 생성 모듈
"""

import random
from typing import List, Optional
from core.process import Process


class InputParser:
    """입력 파일 파서"""

    @staticmethod
    def parse_file(filename: str) -> List[Process]:
        """
        CSV 파일에서 프로세스 정보 읽기

        파일 형식: PID,실행패턴
        예: 1,"5,8,3"  (CPU 5 → I/O 8 → CPU 3)

        Args:
            filename: 입력 파일 경로

        Returns:
            프로세스 리스트
        """
        processes = []

        try:
            with open(filename, 'r', encoding='utf-8') as f:
                for line in f:
                    line = line.strip()

                    # 주석 및 빈 줄 제거
                    if not line or line.startswith('#'):
                        continue

                    try:
                        parts = InputParser._parse_line(line)
                        if parts:
                            process = InputParser._create_process_from_parts(parts)
                            processes.append(process)
                    except ValueError as e:
                        print(f"경고: 라인 파싱 실패: {line}")
                        print(f"오류: {e}")
                        continue
        except FileNotFoundError:
            print(f"오류: 파일 '{filename}'을 찾을 수 없습니다")
            return []

        print(f"{filename}에서 {len(processes)}개의 프로세스를 성공적으로 로드했습니다")
        return processes

    @staticmethod
    def _parse_line(line: str) -> List[str]:
        """CSV 라인 파싱 (따옴표 처리 포함)"""
        parts = []
        current = ""
        in_quotes = False

        for char in line:
            if char == '"':
                in_quotes = not in_quotes
            elif char == ',' and not in_quotes:
                parts.append(current.strip())
                current = ""
            else:
                current += char

        if current:
            parts.append(current.strip())

        return parts

    @staticmethod
    def _create_process_from_parts(parts: List[str]) -> Process:
        """파싱된 부분에서 프로세스 객체 생성"""
        if len(parts) < 2:
            raise ValueError(f"잘못된 형식: 2개 필드가 필요하지만 {len(parts)}개만 있습니다")

        try:
            pid = int(parts[0])
        except ValueError as e:
            raise ValueError(f"숫자 필드 변환 오류: {e}")

        if pid <= 0:
            raise ValueError(f"PID는 양수여야 합니다: {pid}")

        # 실행 패턴 파싱
        execution_pattern_str = parts[1].strip('"\'')
        if not execution_pattern_str:
            raise ValueError("실행 패턴이 비어있습니다")

        try:
            execution_pattern = [int(x.strip()) for x in execution_pattern_str.split(',') if x.strip()]
        except ValueError as e:
            raise ValueError(f"실행 패턴 파싱 오류: {e}")

        if len(execution_pattern) == 0:
            raise ValueError("실행 패턴이 비어있습니다")

        # 검증: 모든 버스트 시간은 양수여야 함
        if any(t <= 0 for t in execution_pattern):
            raise ValueError("모든 버스트 시간은 양수여야 합니다")

        return Process(pid, execution_pattern)

    @staticmethod
    def generate_random_processes(num_processes: int = 10,
                                  max_burst: int = 60,
                                  max_io: int = 40,
                                  seed: Optional[int] = None) -> List[Process]:
        """
        랜덤 프로세스 생성

        Args:
            num_processes: 생성할 프로세스 수
            max_burst: 최대 CPU 버스트 시간
            max_io: 최대 I/O 시간
            seed: 랜덤 시드

        Returns:
            프로세스 리스트
        """
        rng = random.Random(seed)
        processes = []

        for pid in range(1, num_processes + 1):
            # 실행 패턴 생성 (CPU-bound 또는 I/O-bound)
            is_io_bound = rng.random() < 0.4  # 40% 확률로 I/O bound

            if is_io_bound:
                # I/O bound: 짧은 CPU 버스트와 긴 I/O 버스트
                num_bursts = rng.randint(2, 4)
                execution_pattern = []
                for j in range(num_bursts):
                    execution_pattern.append(rng.randint(2, max(2, max_burst // 6)))
                    if j < num_bursts - 1:  # 마지막이 아니면 I/O 추가
                        execution_pattern.append(rng.randint(5, max(5, max_io)))
            else:
                # CPU bound: 긴 CPU 버스트
                num_bursts = rng.randint(1, 2)
                execution_pattern = []
                for j in range(num_bursts):
                    execution_pattern.append(rng.randint(max(1, max_burst // 2), max_burst))
                    if j < num_bursts - 1:
                        execution_pattern.append(rng.randint(2, max(2, max_io // 2)))

            processes.append(Process(pid, execution_pattern))

        print(f"{num_processes}개의 랜덤 프로세스를 생성했습니다")
        return processes

    @staticmethod
    def save_processes_to_file(processes: List[Process], filename: str):
        """
        프로세스 리스트를 파일로 저장

        Args:
            processes: 저장할 프로세스 리스트
            filename: 출력 파일 경로
        """
        with open(filename, 'w', encoding='utf-8') as f:
            f.write("# MLFQ Scheduler Input Data\n")
            f.write("# Format: PID,ExecutionPattern (CPU,IO,CPU,...)\n\n")

            for process in processes:
                pattern_str = ','.join(str(x) for x in process.execution_pattern)
                f.write(f'{process.pid},"{pattern_str}"\n')

        print(f"{len(processes)}개의 프로세스를 {filename}에 성공적으로 저장했습니다")

    @staticmethod
    def print_process_summary(processes: List[Process]):
        """프로세스 요약 정보 출력"""
        print("\n" + "="*70)
        print("프로세스 요약")
        print("="*70)
        print(f"{'PID':<6} {'총 CPU':>10} {'총 I/O':>10} {'버스트 수':>10}  실행 패턴")
        print("-"*70)

        for p in sorted(processes, key=lambda x: x.pid):
            pattern_str = ','.join(str(x) for x in p.execution_pattern)
            print(f"{p.pid:<6} {p.get_total_burst_time():>10} {p.get_total_io_time():>10} "
                  f"{len(p.execution_pattern):>10}  {pattern_str}")

        print("="*70 + "\n")

        cpu_bound = sum(1 for p in processes if len(p.execution_pattern) == 1)
        io_bound = len(processes) - cpu_bound

        print(f"전체 프로세스: {len(processes)}개")
        print(f"  - CPU 중심: {cpu_bound}개")
        print(f"  - I/O 포함: {io_bound}개")
        print()
